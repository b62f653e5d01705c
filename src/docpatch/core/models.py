"""Data models passed between pipeline stages"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict


class Request(BaseModel):
    """One inbound change request; immutable and consumed once."""
    model_config = ConfigDict(frozen=True)

    raw_path:     str
    raw_issue:    str
    username:     str
    callback_url: str = ""


class CorpusEntry(BaseModel):
    """A stored document keyed by its canonical (extensionless, leading-slash) path."""
    model_config = ConfigDict(frozen=True)

    canonical_path: str
    stored_path:    str


class MarkdownDocument(BaseModel):
    """Document content as read from the host, with the version token needed to write it back."""
    stored_path: str
    content:     str
    token:       str


class Proposal(BaseModel):
    """An opened change proposal (pull request)."""
    url:    str
    number: int
    branch: str


@dataclass(frozen=True)
class Block:
    """A heading plus everything up to the next heading of equal-or-shallower depth."""
    heading:      str      # inline heading text, without markers
    level:        int      # heading level (1-6)
    start:        int      # 0-based line offset of the heading
    end:          int      # exclusive line offset where the block stops
    heading_line: str      # raw source line of the heading


@dataclass(frozen=True)
class SectionMatch:
    """Line range of the targeted section within the original content."""
    start:        int
    end:          int
    heading:      str = ""
    level:        int = 0      # 0 marks a whole-document match
    heading_line: str = ""

    @property
    def whole_document(self) -> bool:
        return self.level == 0

    @classmethod
    def from_block(cls, block: Block) -> "SectionMatch":
        return cls(
            start=block.start,
            end=block.end,
            heading=block.heading,
            level=block.level,
            heading_line=block.heading_line,
        )
