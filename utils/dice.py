import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

logger = logging.getLogger("dice_bot")

MAX_INT = 2**31 - 1


class DiceError(ValueError):
    pass


# ---------- 掃描游標 ----------
class Cursor:
    """剩餘未解析的文字；快照是值複本，還原不受之後的消耗影響。"""

    def __init__(self, text: str):
        self._text = text

    def _skip_whitespace(self):
        self._text = self._text.lstrip()

    def is_exhausted(self) -> bool:
        self._skip_whitespace()
        return not self._text

    def read_unsigned_int(self) -> Optional[int]:
        self._skip_whitespace()
        end = 0
        while end < len(self._text) and self._text[end] in "0123456789":
            end += 1
        if end == 0:
            return None
        # 超出 32 位元整數就當作沒讀到數字
        digits = self._text[:end].lstrip("0") or "0"
        if len(digits) > len(str(MAX_INT)) or int(digits) > MAX_INT:
            return None
        value = int(digits)
        self._text = self._text[end:]
        return value

    def read_signed_int(self) -> Optional[int]:
        saved = self.checkpoint()
        negative = False
        if self.consume("-"):
            negative = True
        else:
            self.consume("+")

        value = self.read_unsigned_int()
        if value is None:
            # 符號後沒有數字：符號不算被吃掉
            self.restore(saved)
            return None
        return -value if negative else value

    def consume(self, token: str) -> bool:
        self._skip_whitespace()
        if self._text.startswith(token):
            self._text = self._text[len(token):]
            return True
        return False

    def checkpoint(self) -> "Cursor":
        return Cursor(self._text)

    def restore(self, snapshot: "Cursor"):
        self._text = snapshot._text

    def __repr__(self):
        return f"Cursor({self._text!r})"


# ---------- 擲骰結果 ----------
@dataclass
class RollResult:
    bonus: int = 0
    rolls: List[int] = field(default_factory=list)

    def add_result(self, value: int):
        self.rolls.append(value)

    @property
    def total(self) -> int:
        return sum(self.rolls) + self.bonus

    @property
    def detail(self) -> str:
        text = " + ".join(map(str, self.rolls)) or "0"
        if self.bonus:
            text += f" {self.bonus:+d}"
        return text

    def merge(self, other: "RollResult") -> "RollResult":
        return RollResult(bonus=self.bonus + other.bonus, rolls=self.rolls + other.rolls)

    def __str__(self):
        return f"{self.total} <= {self.detail}"


# ---------- 骰式 ----------
@dataclass(frozen=True)
class SimpleRoll:
    count: int
    sides: int
    bonus: int = 0

    def __str__(self):
        return render(self)


@dataclass(frozen=True)
class CompositeRoll:
    left: "Roll"
    right: "Roll"

    def __str__(self):
        return render(self)


Roll = Union[SimpleRoll, CompositeRoll]


def evaluate(roll: Roll, rng: Optional[random.Random] = None) -> RollResult:
    if isinstance(roll, CompositeRoll):
        # 左右各自擲骰；加值已各自算在自己的 bonus 裡
        return evaluate(roll.left, rng).merge(evaluate(roll.right, rng))

    source = rng or random
    result = RollResult(bonus=roll.bonus)
    for _ in range(roll.count):
        result.add_result(source.randint(1, roll.sides))
    return result


def render(roll: Roll) -> str:
    if isinstance(roll, CompositeRoll):
        return f"{render(roll.left)} & {render(roll.right)}"

    text = f"{roll.count}d{roll.sides}"
    if roll.bonus > 0:
        text += f"+{roll.bonus}"
    elif roll.bonus < 0:
        text += str(roll.bonus)
    return text


def count_dice(roll: Roll) -> int:
    if isinstance(roll, CompositeRoll):
        return count_dice(roll.left) + count_dice(roll.right)
    return roll.count


# ---------- 解析器 ----------
def parse_roll(expr: str) -> Optional[List[Roll]]:
    """把骰式解析成依序排列的 Roll；任何一段不合法就整串回傳 None。

    語法：
        sequence := compound (';' compound)*
        compound := [N 'x'] dice_expr
        dice_expr := dice_base ('&' dice_expr)*
        dice_base := [N] 'd' S [±B]

    NxExpr 會展開成 N 個同一個 Roll，下游各自擲骰。
    """
    terms = parse_terms(expr)
    if terms is None:
        return None
    return [roll for roll, repeat in terms for _ in range(repeat)]


def parse_terms(expr: str) -> Optional[List[Tuple[Roll, int]]]:
    # 同 parse_roll，但倍數不展開：每段是 (Roll, 重複次數)
    cursor = Cursor(expr.lower())
    terms = _parse_sequence(cursor)
    if terms is None or not cursor.is_exhausted():
        logger.debug(f"無法解析骰式：{expr!r}")
        return None
    return terms


def _parse_sequence(cursor: Cursor) -> Optional[List[Tuple[Roll, int]]]:
    terms: List[Tuple[Roll, int]] = []
    while True:
        compound = _parse_compound(cursor)
        if compound is None:
            return None
        terms.append(compound)
        if not cursor.consume(";"):
            return terms


def _parse_compound(cursor: Cursor) -> Optional[Tuple[Roll, int]]:
    saved = cursor.checkpoint()
    repeat = cursor.read_unsigned_int()
    if repeat is None:
        repeat = 1
    elif not cursor.consume("x"):
        # 不是倍數，數字留給 dice_base 當骰子顆數
        cursor.restore(saved)
        repeat = 1

    roll = _parse_dice_expr(cursor)
    if roll is None:
        return None
    return roll, repeat


def _parse_dice_expr(cursor: Cursor) -> Optional[Roll]:
    roll = _parse_dice_base(cursor)
    if roll is None:
        return None

    while cursor.consume("&"):
        right = _parse_dice_expr(cursor)
        if right is None:
            return None
        roll = CompositeRoll(roll, right)
    return roll


def _parse_dice_base(cursor: Cursor) -> Optional[SimpleRoll]:
    count = cursor.read_unsigned_int()
    if count is None:
        count = 1

    if not cursor.consume("d"):
        return None

    sides = cursor.read_unsigned_int()
    if sides is None or sides < 1:
        return None

    bonus = cursor.read_signed_int()
    return SimpleRoll(count, sides, bonus or 0)


def _max_sides(roll: Roll) -> int:
    if isinstance(roll, CompositeRoll):
        return max(_max_sides(roll.left), _max_sides(roll.right))
    return roll.sides


# ---------- 給指令用的包裝 ----------
def roll_expression(expr: str, *, max_rolls: int = 50, max_dice: int = 500,
                    max_sides: int = 1000) -> List[Tuple[Roll, RollResult]]:
    terms = parse_terms(expr)
    if terms is None:
        raise DiceError(f"無法解析骰式：`{expr}`。範例：d6、2d6+1、4x3d8-5、2d6 & d4+1、d20 ; 2d6")

    # 先用重複次數檢查上限，避免展開超大的 NxExpr
    n_rolls = sum(repeat for _, repeat in terms)
    if n_rolls == 0:
        raise DiceError("骰式沒有任何要擲的骰子（倍數為 0）。")
    if n_rolls > max_rolls:
        raise DiceError(f"一次最多擲 {max_rolls} 組（目前 {n_rolls} 組）")

    total_dice = sum(count_dice(roll) * repeat for roll, repeat in terms)
    if total_dice > max_dice:
        raise DiceError(f"骰子總顆數上限 {max_dice}（目前 {total_dice} 顆）")

    sides = max(_max_sides(roll) for roll, _ in terms)
    if sides > max_sides:
        raise DiceError(f"骰面數上限 {max_sides}（目前 {sides} 面）")

    return [(roll, evaluate(roll)) for roll, repeat in terms for _ in range(repeat)]
