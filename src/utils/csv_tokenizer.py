"""
Character-level CSV tokenizer.

Quoted fields may contain commas, doubled quotes and line breaks, so rows cannot
be found by splitting on newlines first. The tokenizer walks the text once and
tracks where it is with an explicit TokenizerState.
"""
import enum
from typing import List


class TokenizerState(str, enum.Enum):
    UNQUOTED = "unquoted"
    QUOTED = "quoted"
    QUOTED_SAW_QUOTE = "quoted_saw_quote"


class CsvTokenizer:
    """
    Turns CSV text into rows of string fields.

    - a quote toggles quoting; inside quotes a doubled quote is one literal quote
    - a comma outside quotes ends the field
    - CR, LF or CRLF outside quotes ends the row
    - rows holding a single empty field are dropped
    - a final row without a line terminator is still emitted
    """

    def __init__(self) -> None:
        self.state = TokenizerState.UNQUOTED
        self.rows: List[List[str]] = []
        self._row: List[str] = []
        self._field: List[str] = []
        self._pending_cr = False

    def tokenize(self, text: str) -> List[List[str]]:
        for char in text:
            self._consume(char)
        self._finish()
        return self.rows

    def _consume(self, char: str) -> None:
        if self._pending_cr:
            self._pending_cr = False
            if char == '\n':
                return

        if self.state == TokenizerState.QUOTED_SAW_QUOTE:
            if char == '"':
                self._field.append('"')
                self.state = TokenizerState.QUOTED
                return
            # The previous quote closed the quoted section.
            self.state = TokenizerState.UNQUOTED

        if self.state == TokenizerState.QUOTED:
            if char == '"':
                self.state = TokenizerState.QUOTED_SAW_QUOTE
            else:
                self._field.append(char)
            return

        if char == '"':
            self.state = TokenizerState.QUOTED
        elif char == ',':
            self._end_field()
        elif char == '\r':
            self._end_row()
            self._pending_cr = True
        elif char == '\n':
            self._end_row()
        else:
            self._field.append(char)

    def _end_field(self) -> None:
        self._row.append(''.join(self._field))
        self._field = []

    def _end_row(self) -> None:
        self._end_field()
        if self._row != ['']:
            self.rows.append(self._row)
        self._row = []

    def _finish(self) -> None:
        if self._field or self._row:
            self._end_row()
        self.state = TokenizerState.UNQUOTED


def tokenize_csv(text: str) -> List[List[str]]:
    """Tokenize CSV text into a list of rows."""
    if not isinstance(text, str):
        raise TypeError(f"CSV content must be a string, got {type(text).__name__}")
    return CsvTokenizer().tokenize(text)
