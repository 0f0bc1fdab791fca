"""探测与监控相关的数据模型"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class ProbeStatus(Enum):
    """单次探测结果分类"""
    SUCCESS = "success"
    HTTP_ERROR = "http-error"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network-error"
    MISSING_CREDENTIAL = "missing-credential"
    # 被停止请求打断，调用方直接丢弃，不写入状态表
    CANCELLED = "cancelled"


class ApiStyle(Enum):
    """提供商请求格式"""
    OPENAI = "openai"
    GOOGLE = "google"


@dataclass(frozen=True)
class Target:
    """一个探测目标：(提供商, 模型, 端点, 凭据)"""
    provider_key: str
    model_id: str
    endpoint: str
    credential: Optional[str] = None
    api_style: str = ApiStyle.OPENAI.value

    @property
    def key(self) -> str:
        """状态表中的键，格式为 ``provider:model``"""
        return f"{self.provider_key}:{self.model_id}"

    def __repr__(self) -> str:
        # 不在日志里泄露密钥
        return (f"Target(provider_key={self.provider_key!r}, model_id={self.model_id!r}, "
                f"api_style={self.api_style!r}, has_credential={bool(self.credential)})")


@dataclass(frozen=True)
class ProbeOutcome:
    """单次HTTP探测的结果"""
    status: ProbeStatus
    latency_ms: Optional[int] = None
    message: Optional[str] = None
    http_status: Optional[int] = None
    detail: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status is ProbeStatus.SUCCESS

    @property
    def is_cancelled(self) -> bool:
        return self.status is ProbeStatus.CANCELLED

    @classmethod
    def cancelled(cls) -> 'ProbeOutcome':
        return cls(status=ProbeStatus.CANCELLED)

    @classmethod
    def missing_credential(cls) -> 'ProbeOutcome':
        return cls(status=ProbeStatus.MISSING_CREDENTIAL, message="No API key")


@dataclass
class StatusSnapshot:
    """某个目标最近一次探测结果及检查时间"""
    target: Target
    outcome: ProbeOutcome
    last_checked: datetime = field(default_factory=datetime.now)

    @property
    def key(self) -> str:
        return self.target.key

    @property
    def status(self) -> ProbeStatus:
        return self.outcome.status

    def to_dict(self) -> dict:
        """转换为适合展示或序列化的字典（不含密钥）"""
        return {
            'key': self.key,
            'provider': self.target.provider_key,
            'model': self.target.model_id,
            'status': self.outcome.status.value,
            'latency_ms': self.outcome.latency_ms,
            'message': self.outcome.message,
            'http_status': self.outcome.http_status,
            'last_checked': self.last_checked.isoformat(),
        }


class ModelStatus(Enum):
    """Ping历史中的模型状态"""
    PENDING = "pending"
    UP = "up"
    DOWN = "down"
    TIMEOUT = "timeout"
    NOAUTH = "noauth"


class Verdict(Enum):
    """基于平均延迟和状态得出的结论"""
    PERFECT = "Perfect"
    NORMAL = "Normal"
    SLOW = "Slow"
    VERY_SLOW = "Very Slow"
    OVERLOADED = "Overloaded"
    UNSTABLE = "Unstable"
    NOT_ACTIVE = "Not Active"
    PENDING = "Pending"


VERDICT_ORDER: List[Verdict] = list(Verdict)


@dataclass
class PingResult:
    """历史中的一次ping记录

    ms 只在成功时有值；code 为 HTTP 状态码字符串，超时为 '000'，网络错误为 'ERR'
    """
    ms: Optional[int]
    code: str

    @property
    def is_success(self) -> bool:
        return self.code.isdigit() and 200 <= int(self.code) < 300

    @property
    def is_timeout(self) -> bool:
        return self.code == '000'


@dataclass
class ModelResult:
    """带有ping历史的模型结果"""
    idx: int
    model_id: str
    label: str
    tier: str
    swe_score: str
    ctx: str
    provider_key: str
    status: ModelStatus = ModelStatus.PENDING
    pings: List[PingResult] = field(default_factory=list)
    http_code: Optional[str] = None
    hidden: bool = False

    @property
    def key(self) -> str:
        return f"{self.provider_key}:{self.model_id}"
