"""批次运行状态模型。"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RunPhase(str, Enum):
    """批次运行阶段"""

    IDLE = "idle"
    SUBMITTING = "submitting"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_active(self) -> bool:
        return self in (RunPhase.SUBMITTING, RunPhase.PROCESSING)

    @property
    def is_terminal(self) -> bool:
        return self in (RunPhase.SUCCEEDED, RunPhase.FAILED)


class BatchRun(BaseModel):
    """一次压缩运行的状态快照"""

    model_config = ConfigDict(frozen=True)

    phase: RunPhase = Field(RunPhase.IDLE, description="当前阶段")
    progress_percent: int = Field(0, ge=0, le=100, description="上传进度")
    generation: int = Field(0, ge=0, description="运行代数，用于丢弃过期响应")
    error: str | None = Field(None, description="失败原因")
