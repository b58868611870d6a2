# kixidb/statements.py
from pathlib import Path
from typing import Iterator, Union

from .errors import SchemaDecodeError, SchemaNotFoundError

__all__ = ["SqlScript", "split_statements"]

DELIMITER = ";"
COMMENT = "--"


def _strip_comment_lines(segment: str) -> str:
    lines = [ln for ln in segment.splitlines() if not ln.lstrip().startswith(COMMENT)]
    return "\n".join(lines).strip()


def split_statements(sql: str) -> Iterator[str]:
    """
    스키마 문서를 ';' 기준으로 단순 분할.
      - 각 조각은 앞뒤 공백 제거
      - 줄 전체가 '--' 주석인 줄은 제거
      - 빈 조각(주석만 있던 조각 포함)은 버림
    문자열 리터럴/$$ 본문/줄 끝 주석 안의 ';' 는 구분하지 않는다.
    스키마 문서는 그런 ';' 가 없도록 작성되어 있어야 한다.
    """
    for segment in sql.split(DELIMITER):
        stmt = _strip_comment_lines(segment)
        if not stmt:
            continue
        yield stmt


class SqlScript:
    """반복할 때마다 새로 분할하는 문장 시퀀스 (재시작 가능)."""

    def __init__(self, text: str, source: str = "<string>"):
        self.text = text
        self.source = source

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SqlScript":
        path = Path(path)
        if not path.is_file():
            raise SchemaNotFoundError(path)
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise SchemaDecodeError(path, e) from e
        return cls(text, source=str(path))

    def __iter__(self) -> Iterator[str]:
        return split_statements(self.text)

    def __len__(self) -> int:
        return sum(1 for _ in self)
