"""分析请求相关的异常。"""


class AnalyzerError(Exception):
    """所有分析错误的基类。"""

    user_message = "分析失败"

    def __init__(self, message: str = None):
        super().__init__(message or self.user_message)


class AnalyzerUnreachable(AnalyzerError):
    """无法连接分析服务（网络/连接失败）。"""

    user_message = "无法连接分析服务"


class ServerRejected(AnalyzerError):
    """分析服务返回了非成功状态码。"""

    def __init__(self, status: int, status_text: str = ""):
        self.status = status
        self.status_text = status_text or ""
        super().__init__(f"请求失败：{status} {self.status_text}".rstrip())

    @property
    def user_message(self):
        return str(self)


class MalformedResponse(AnalyzerError):
    """响应体不是合法的 JSON。"""

    user_message = "分析服务返回了无法解析的响应"


class SubmissionInProgress(AnalyzerError):
    """当前已有一个分析请求在进行中。"""

    user_message = "正在分析中，请等待当前请求完成"
