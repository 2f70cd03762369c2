"""
前端配置：所有设置集中在这里，可通过环境变量（或项目根目录下的 .env 文件）覆盖：
    ANALYZER_URL        分析服务地址（默认 http://localhost:8080/analyze）
    ANALYZER_TIMEOUT    请求超时秒数（默认不设超时，一直等待响应）
    SECRET_KEY          Flask 会话签名密钥
    LOG_LEVEL           日志级别（默认 INFO）
    SESSION_LIMIT       最多保留的浏览器会话数（默认 1000，超出时淘汰最久未访问的）
    FLASK_DEBUG         1 开启调试模式
"""
import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_ANALYZER_URL = "http://localhost:8080/analyze"


def _timeout(raw):
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"ANALYZER_TIMEOUT 必须是数字，实际为 {raw!r}")
    return value if value > 0 else None


def load_config():
    """读取环境变量，返回可直接放入 app.config 的字典。"""
    return {
        "ANALYZER_URL": os.getenv("ANALYZER_URL", DEFAULT_ANALYZER_URL),
        "ANALYZER_TIMEOUT": _timeout(os.getenv("ANALYZER_TIMEOUT", "")),
        "SECRET_KEY": os.getenv("SECRET_KEY", "dev-only-secret"),
        "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO").upper(),
        "SESSION_LIMIT": int(os.getenv("SESSION_LIMIT", "1000")),
        "DEBUG": os.getenv("FLASK_DEBUG", "0") in ("1", "true", "True"),
    }


# 页面初始示例代码
SAMPLE_CODE = '''x = 10
y = 3.5
name = "analyzer"
if x > 5:
    print(x + y)
# comment
total = x * 2
'''
