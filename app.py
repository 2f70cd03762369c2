import logging

from flask import Flask

from client import AnalysisClient
from config import load_config
from routes import analyze, index, select_tab
from session import SessionStore


def create_app(overrides=None, client=None):
    app = Flask(__name__)
    app.config.update(load_config())
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # 分析服务客户端与会话存储挂在 app 上，测试时可替换客户端
    app.extensions["analysis_client"] = client or AnalysisClient(
        app.config["ANALYZER_URL"], timeout=app.config["ANALYZER_TIMEOUT"]
    )
    app.extensions["analysis_sessions"] = SessionStore(app.config["SESSION_LIMIT"])

    # 注册路由
    app.add_url_rule("/", view_func=index)
    app.add_url_rule("/analyze", view_func=analyze, methods=["POST"])
    app.add_url_rule("/tab/<tab>", view_func=select_tab, methods=["POST"])

    app.logger.info("analyzer endpoint: %s", app.config["ANALYZER_URL"])
    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=app.config["DEBUG"])
