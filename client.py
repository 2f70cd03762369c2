"""分析服务客户端：把源码发给远端 /analyze，返回规范化后的 AnalysisResult。"""

import logging

import requests

from exceptions import AnalyzerUnreachable, MalformedResponse, ServerRejected
from models import AnalysisResult

logger = logging.getLogger(__name__)


class AnalysisClient:
    def __init__(self, url: str, timeout=None, session=None):
        self.url = url
        self.timeout = timeout
        # 允许注入 requests.Session（连接复用 / 测试替身）
        self.http = session or requests

    def submit(self, source_text: str) -> AnalysisResult:
        """发送一次请求，不重试。失败时抛出 AnalyzerError 的子类。"""
        logger.info("POST %s (%d chars)", self.url, len(source_text or ""))
        try:
            response = self.http.post(
                self.url,
                json={"code": source_text},
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("analyzer unreachable at %s: %s", self.url, e)
            raise AnalyzerUnreachable() from e

        if not 200 <= response.status_code < 300:
            logger.warning("analyzer rejected request: %s %s", response.status_code, response.reason)
            raise ServerRejected(response.status_code, response.reason)

        try:
            payload = response.json()
        except (ValueError, RecursionError) as e:
            # RecursionError：嵌套过深，json 解码器无法处理
            logger.warning("analyzer returned a body that could not be decoded")
            raise MalformedResponse() from e

        logger.info("analyzer responded %s", response.status_code)
        return AnalysisResult.from_payload(payload)
