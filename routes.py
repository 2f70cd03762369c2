from pathlib import Path

from flask import current_app, jsonify, render_template_string, request, session

from config import SAMPLE_CODE
from exceptions import SubmissionInProgress
from presenter import present, summary

PAGE = Path(__file__).resolve().parent / "frontend.html"


def _store():
    return current_app.extensions["analysis_sessions"]


def _client():
    return current_app.extensions["analysis_client"]


def _current_session():
    """取出当前浏览器对应的分析会话（会话键保存在签名 cookie 中）。"""
    store = _store()
    key = session.get("sid")
    if key is None:
        key = store.new_key()
        session["sid"] = key
    return key, store.get(key, SAMPLE_CODE)


def _render(analysis, notice=None, status=200):
    view = present(analysis.result, analysis.active_tab) if analysis.result is not None else None
    html = render_template_string(
        PAGE.read_text(encoding="utf-8"),
        code=analysis.source_text,
        state=analysis.state,
        error=analysis.error_message,
        notice=notice,
        view=view,
    )
    return html, status


def index():
    key, analysis = _current_session()
    tab = request.args.get("tab")
    if tab:
        _store().select_tab(key, tab)
    return _render(analysis)


def analyze():
    """表单提交时返回页面；JSON 请求时返回 JSON。"""
    wants_json = request.is_json
    if wants_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not isinstance(data.get("code", ""), str):
            return jsonify({"success": False, "error": "请求体必须是 {\"code\": \"...\"}"}), 400
        code = data.get("code", "")
        supersede = data.get("supersede") is True
    else:
        code = request.form.get("code", "")
        supersede = False

    key, analysis = _current_session()
    try:
        analysis, accepted = _store().run(key, _client(), code, supersede=supersede)
    except SubmissionInProgress as e:
        current_app.logger.info("rejected concurrent submission for session %s", key)
        if wants_json:
            return jsonify({"success": False, "error": e.user_message}), 409
        return _render(analysis, notice=e.user_message, status=409)

    if not wants_json:
        return _render(analysis)

    if not accepted:
        # 另一次更新的提交已经接管了这个会话
        return jsonify({"success": False, "stale": True, "error": "该请求已被更新的提交取代"}), 409
    if analysis.error is not None:
        current_app.logger.warning("analysis failed: %s", analysis.error)
        return jsonify({"success": False, "error": analysis.error_message}), 502
    try:
        return jsonify({
            "success": True,
            "result": analysis.result.to_dict(),
            "summary": summary(analysis.result),
        })
    except RecursionError:
        # 语法树过深时 json 编码器会超出递归上限；页面渲染不受影响
        current_app.logger.warning("result too deeply nested to encode as JSON")
        return jsonify({"success": False, "error": "分析结果嵌套过深，无法以 JSON 返回"}), 502


def select_tab(tab):
    """切换标签页，只改变显示的区域，不重新请求分析服务。"""
    key, _ = _current_session()
    active = _store().select_tab(key, tab)
    return jsonify({"active_tab": active})
