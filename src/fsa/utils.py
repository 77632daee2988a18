from enum import Enum, IntFlag, auto
from typing import Final, Iterable, Iterator, Optional

UNSET: Final[int] = -1

Block = frozenset[int]


class Polarity(Enum):
    ACCEPT = "+"
    REJECT = "-"

    @property
    def accepts(self) -> bool:
        return self is Polarity.ACCEPT

    @staticmethod
    def from_marker(marker: str) -> "Polarity":
        """
        >>> Polarity.from_marker('+')
        <Polarity.ACCEPT: '+'>
        >>> Polarity.from_marker('-').accepts
        False
        """
        return Polarity(marker)


class FsaFlag(IntFlag):
    NOFLAG = auto()
    DEBUG = auto()
    RENDER = auto()

    def should_trace(self) -> bool:
        return bool(self & FsaFlag.DEBUG)

    def should_render(self) -> bool:
        return bool(self & FsaFlag.RENDER)


class LabelIndex:
    """
    A bijection between string labels and the dense integers 0..n-1

    Labels are numbered in insertion order and an index is never reused,
    registering a label only ever appends.

    Examples
    --------
    >>> sigma = LabelIndex(['a', 'b'])
    >>> sigma.add('c')
    2
    >>> sigma.add('a')
    0
    >>> sigma.label(1)
    'b'
    >>> len(sigma)
    3
    """

    __slots__ = ("_indices", "_labels")

    def __init__(self, labels: Iterable[str] = ()):
        self._indices: dict[str, int] = {}
        self._labels: list[str] = []
        for label in labels:
            self.add(label)

    def add(self, label: str) -> int:
        if (index := self._indices.get(label)) is not None:
            return index
        index = len(self._labels)
        self._indices[label] = index
        self._labels.append(label)
        return index

    def index(self, label: str) -> Optional[int]:
        return self._indices.get(label)

    def label(self, index: int) -> str:
        if not 0 <= index < len(self._labels):
            raise IndexError(f"index should be 0 <= {index} < {len(self._labels)}")
        return self._labels[index]

    def copy(self) -> "LabelIndex":
        return LabelIndex(self._labels)

    def items(self) -> Iterator[tuple[str, int]]:
        yield from zip(self._labels, range(len(self._labels)))

    def __contains__(self, label: object) -> bool:
        return label in self._indices

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __len__(self) -> int:
        return len(self._labels)

    def __repr__(self):
        return f"{self.__class__.__name__}({self._labels!r})"
