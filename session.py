# session.py - 每个浏览器会话的分析状态

import itertools
import logging
import threading
import uuid
from collections import OrderedDict

from exceptions import AnalyzerError, MalformedResponse, SubmissionInProgress

logger = logging.getLogger(__name__)

IDLE = "idle"
SUBMITTING = "submitting"
SUCCEEDED = "succeeded"
FAILED = "failed"

TABS = ("lexical", "syntax", "semantic", "symbols")
DEFAULT_TAB = "lexical"
DEFAULT_MAX_SESSIONS = 1000


class AnalysisSession:
    """
    一个分析会话的全部可变状态：
    - 当前源码、当前周期状态与周期编号
    - 当前结果或当前错误（二者最多存在一个）
    - 当前激活的标签页
    状态转移：idle -> submitting -> succeeded / failed，下一次提交重新进入 submitting。
    """
    def __init__(self, source_text=""):
        self.source_text = source_text
        self.state = IDLE
        self.cycle_id = 0
        self.result = None
        self.error = None
        self.active_tab = DEFAULT_TAB
        self._cycles = itertools.count(1)

    def begin(self, source_text, supersede=False):
        """开始新的分析周期，返回周期编号。已有请求在途时默认拒绝。"""
        if self.state == SUBMITTING:
            if not supersede:
                raise SubmissionInProgress()
            logger.info("cycle %d superseded", self.cycle_id)
        self.cycle_id = next(self._cycles)
        self.state = SUBMITTING
        self.source_text = source_text
        # 新周期完全替换上一次的结果，不做合并
        self.result = None
        self.error = None
        return self.cycle_id

    def _is_current(self, cycle_id):
        if cycle_id != self.cycle_id or self.state != SUBMITTING:
            logger.info("discarding stale response for cycle %d (current %d)", cycle_id, self.cycle_id)
            return False
        return True

    def succeed(self, cycle_id, result):
        if not self._is_current(cycle_id):
            return False
        self.state = SUCCEEDED
        self.result = result
        return True

    def fail(self, cycle_id, error):
        if not self._is_current(cycle_id):
            return False
        self.state = FAILED
        self.error = error
        return True

    def select_tab(self, tab):
        """切换标签页；未知标签忽略。不重新请求，也不重新计算结果。"""
        if tab in TABS:
            self.active_tab = tab
        return self.active_tab

    @property
    def error_message(self):
        return self.error.user_message if self.error is not None else None


class SessionStore:
    """
    按浏览器会话键保存 AnalysisSession。Flask 可能多线程处理请求，所以加锁。
    最多保留 max_sessions 个会话，超出时淘汰最久未访问的会话。
    """
    def __init__(self, max_sessions=DEFAULT_MAX_SESSIONS):
        self.max_sessions = max_sessions
        self._sessions = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def new_key():
        return uuid.uuid4().hex

    def get(self, key, source_text=""):
        with self._lock:
            session = self._sessions.get(key)
            if session is None:
                session = AnalysisSession(source_text)
                self._sessions[key] = session
                while len(self._sessions) > self.max_sessions:
                    evicted, _ = self._sessions.popitem(last=False)
                    logger.info("evicted session %s", evicted)
            else:
                self._sessions.move_to_end(key)
            return session

    def run(self, key, client, source_text, supersede=False):
        """
        begin/complete 在锁内执行，网络请求在锁外执行。
        返回 (session, accepted)；accepted 为 False 表示响应已过期被丢弃。
        无论 submit 抛出什么异常，本周期都会进入 failed 终态。
        """
        session = self.get(key)
        with self._lock:
            cycle_id = session.begin(source_text, supersede=supersede)
        try:
            result = client.submit(source_text)
        except AnalyzerError as e:
            with self._lock:
                accepted = session.fail(cycle_id, e)
        except Exception:
            logger.exception("unexpected error while handling analyzer response")
            with self._lock:
                accepted = session.fail(cycle_id, MalformedResponse())
        else:
            with self._lock:
                accepted = session.succeed(cycle_id, result)
        return session, accepted

    def select_tab(self, key, tab):
        session = self.get(key)
        with self._lock:
            return session.select_tab(tab)

    def __contains__(self, key):
        return key in self._sessions

    def __len__(self):
        return len(self._sessions)
