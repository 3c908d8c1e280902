"""Page validation and activity outcome models."""

from pydantic import BaseModel, ConfigDict

from core.types import OutcomeKind


class PageCheckResult(BaseModel):
    """Health classification of a browser page."""

    model_config = ConfigDict(frozen=True)

    invalid: bool
    reason: str | None = None

    @classmethod
    def valid(cls) -> "PageCheckResult":
        return cls(invalid=False)

    @classmethod
    def invalid_because(cls, reason: str) -> "PageCheckResult":
        return cls(invalid=True, reason=reason)


class ActivityOutcome(BaseModel):
    """Tagged result of one recovery-protected activity."""

    model_config = ConfigDict(frozen=True)

    kind: OutcomeKind
    reason: str | None = None
    url: str | None = None

    @classmethod
    def completed(cls) -> "ActivityOutcome":
        return cls(kind=OutcomeKind.COMPLETED)

    @classmethod
    def skipped_invalid_page(cls, reason: str) -> "ActivityOutcome":
        return cls(kind=OutcomeKind.SKIPPED_INVALID_PAGE, reason=reason)

    @classmethod
    def redirected_and_aborted(cls, reason: str) -> "ActivityOutcome":
        return cls(kind=OutcomeKind.REDIRECTED_AND_ABORTED, reason=reason)

    @classmethod
    def domain_mismatch(cls, url: str) -> "ActivityOutcome":
        return cls(kind=OutcomeKind.DOMAIN_MISMATCH, url=url)

    @classmethod
    def failed(cls, reason: str) -> "ActivityOutcome":
        return cls(kind=OutcomeKind.FAILED, reason=reason)

    @property
    def is_success(self) -> bool:
        return self.kind == OutcomeKind.COMPLETED


class RunSummary(BaseModel):
    """Aggregate of the activity outcomes produced by one run."""

    accounts_processed: int = 0
    outcomes: dict[OutcomeKind, int] = {}

    def record(self, outcome: ActivityOutcome) -> None:
        self.outcomes[outcome.kind] = self.outcomes.get(outcome.kind, 0) + 1

    @property
    def total(self) -> int:
        return sum(self.outcomes.values())
