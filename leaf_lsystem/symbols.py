"""Turtle vocabulary and reserved characters."""

PITCH_UP = "^"
PITCH_DOWN = "/"
TURN_LEFT = "-"
TURN_RIGHT = "+"
MOVE = "_"
PUSH = "["
POP = "]"

MOVEMENT_SYMBOLS = PITCH_UP + PITCH_DOWN + TURN_LEFT + TURN_RIGHT + MOVE
BRANCH_SYMBOLS = PUSH + POP
TURTLE_OPERATORS = MOVEMENT_SYMBOLS + BRANCH_SYMBOLS

CONTEXT_LEFT = "<"
CONTEXT_RIGHT = ">"
CHANCE_OPEN = "("
CHANCE_CLOSE = ")"
RULE_ONLY_SYMBOLS = CONTEXT_LEFT + CONTEXT_RIGHT + CHANCE_OPEN + CHANCE_CLOSE

RESERVED_SYMBOLS = TURTLE_OPERATORS + RULE_ONLY_SYMBOLS


def is_drawable(symbol: str) -> bool:
    return symbol not in TURTLE_OPERATORS


def usage_text() -> str:
    """Human readable reference of every symbol and rule form."""
    lines = [
        "Turtle:",
        "---------------",
        f"pitch up: {PITCH_UP}",
        f"pitch down: {PITCH_DOWN}",
        f"turn left: {TURN_LEFT}",
        f"turn right: {TURN_RIGHT}",
        f"move forward without placing a block: {MOVE}",
        "all other symbols place a block (or bound geometry) and move forward 1 step",
        "",
        "Branching:",
        "---------------",
        f"start branch: {PUSH}",
        f"end branch: {POP}",
        "",
        "Rule only:",
        "---------------",
        f"context left: {CONTEXT_LEFT}",
        f"context right: {CONTEXT_RIGHT}",
        f"stochastic left: {CHANCE_OPEN}",
        f"stochastic right: {CHANCE_CLOSE}",
        "",
        "How to write rules:",
        "---------------",
        "simple rule: a=ab (not a = ab)",
        "context-sensitive rule: a<b>c=d, a<b=c or b>c=d. The selected symbol is 'b'.",
        "stochastic rule: a(0.5)=b or a(0.5)=b=c. The selected symbol is 'a'.",
        "  a(0.5)=b   -> 50% chance a becomes b, otherwise a is deleted",
        "  a(0.5)=b=c -> 50% chance a becomes b, otherwise c",
    ]
    return "\n".join(lines)
