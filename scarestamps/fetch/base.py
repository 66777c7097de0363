from dataclasses import dataclass

@dataclass
class FetchOutcome:
    ok: bool
    status: int
    body: str
    url: str = ""
