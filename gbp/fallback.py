from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

import httpx


Probe = Callable[[], Awaitable[httpx.Response]]


@dataclass
class Candidate:
    label: str
    probe: Probe


@dataclass
class ProbeResult:
    label: str
    response: httpx.Response
    attempts: int

    @property
    def ok(self) -> bool:
        return self.response.is_success


async def first_success(candidates: Sequence[Candidate]) -> ProbeResult:
    """
    Prueba los candidatos en orden, uno detrás de otro, y se queda con el
    primero que responde 2xx. Si fallan todos, devuelve el último fallo.
    """
    if not candidates:
        raise ValueError("first_success necesita al menos un candidato")

    result = None
    for attempt, candidate in enumerate(candidates, start=1):
        response = await candidate.probe()
        print(f"[gbp] probe {attempt}/{len(candidates)} {candidate.label}: {response.status_code}")
        result = ProbeResult(label=candidate.label, response=response, attempts=attempt)
        if result.ok:
            break
    return result
