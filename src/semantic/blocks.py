"""
Máquina de estados para el anidamiento de bloques.

Cada palabra de apertura (IF, FOR, WHILE, ...) se apila con su línea; cada
cierre desapila y se compara contra el cierre requerido.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple

from lexing.keywords import BLOCK_KEYWORDS

# Pares aceptados aunque el cierre no tenga la forma ENDxxx
TOLERATED_PAIRS = frozenset({("FOR", "NEXT"), ("REPEAT", "UNTIL")})


@dataclass(frozen=True)
class BlockFrame:
    keyword: str  # Palabra de apertura
    line: int     # Línea donde se abrió

    @property
    def closer(self) -> str:
        return BLOCK_KEYWORDS[self.keyword]


class BlockStack:
    """
    Pila LIFO de bloques abiertos.

    Ejemplo:
        stack = BlockStack()
        stack.open("IF", 1)
        stack.close("ENDWHILE", 3)   # "Expected ENDIF but found ENDWHILE"
    """

    def __init__(self):
        self._frames: List[BlockFrame] = []

    def open(self, keyword: str, line: int) -> BlockFrame:
        frame = BlockFrame(keyword, line)
        self._frames.append(frame)
        return frame

    def close(self, keyword: str, line: int) -> Tuple[Optional[BlockFrame], Optional[str]]:
        """
        Procesa un cierre.

        Returns:
            (frame desapilado o None, mensaje de error o None)
        """
        if not self._frames:
            return None, f"Unexpected {keyword} without matching opening"

        frame = self._frames.pop()
        if keyword != frame.closer and (frame.keyword, keyword) not in TOLERATED_PAIRS:
            return frame, f"Expected {frame.closer} but found {keyword}"
        return frame, None

    def unclosed(self) -> List[BlockFrame]:
        return list(self._frames)

    def __len__(self) -> int:
        return len(self._frames)


def unmatched_message(frame: BlockFrame) -> str:
    return f"Unmatched {frame.keyword} - missing {frame.closer}"
