"""Known errata in the published JVMS verifier listings.

Each entry repairs one transcription mistake in the Oracle HTML relative to
the intended Prolog. Entries are evaluated in order and the first match wins,
so a block receives at most one fix. Adding an erratum is a data change: append
a Correction to CORRECTIONS whose trigger is false once its fix is applied.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple


@dataclass(frozen=True, slots=True)
class Correction:
    name: str
    section: str
    applies: Callable[[str], bool]
    fix: Callable[[str], str]


_PROTECTED_MEMBER_CLAUSE = "classesInOtherPkgWithProtectedMember"
_EQUIVALENT_TYPE_RULE = "instructionHasEquivalentTypeRule"
_IS_INIT_TERMINATED = "isInit(Method)."
_BALOAD_HEAD_TAIL = "NextStackFrame, ExceptionStackFrame) :"


CORRECTIONS: Tuple[Correction, ...] = (
    # classesInOtherPkgWithProtectedMember(..., [class(MemberClassName, L) | Tail], T] :-
    Correction(
        name="protected_member_head_bracket",
        section="4.10.1.8",
        applies=lambda s: _PROTECTED_MEMBER_CLAUSE in s,
        fix=lambda s: s.replace("T] :-", "T) :-"),
    ),
    # instructionHasEquivalentTypeRule(ldc_w(CP), ldc(CP))
    Correction(
        name="equivalent_type_rule_terminator",
        section="4.10.1.9",
        applies=lambda s: s.startswith(_EQUIVALENT_TYPE_RULE) and not s.endswith("."),
        fix=lambda s: s + ".",
    ),
    # isInitHandler body: "isInit(Method)." ends the clause one goal too early.
    Correction(
        name="is_init_handler_conjunction",
        section="4.10.1.6",
        applies=lambda s: s == _IS_INIT_TERMINATED,
        fix=lambda s: "isInit(Method),",
    ),
    # instructionIsTypeSafe(baload, ...) head is followed by ":" instead of ":-".
    Correction(
        name="baload_neck_operator",
        section="4.10.1.9",
        applies=lambda s: s.endswith(_BALOAD_HEAD_TAIL),
        fix=lambda s: s + "-",
    ),
)


def matching_correction(text: str) -> Optional[Correction]:
    """Return the first correction whose trigger matches ``text``."""

    for correction in CORRECTIONS:
        if correction.applies(text):
            return correction
    return None


def correct(text: str, enabled: bool = True) -> str:
    if not enabled:
        return text
    correction = matching_correction(text)
    if correction is None:
        return text
    return correction.fix(text)


__all__ = [
    "CORRECTIONS",
    "Correction",
    "correct",
    "matching_correction",
]
