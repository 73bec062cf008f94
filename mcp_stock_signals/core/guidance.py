"""
Guidance extraction - forward-looking statements in filing text

Best-effort, pattern-driven. Each pattern in a table is scanned independently
over the whole document, one line at a time, so the same sentence can be caught
more than once; duplicates are collapsed on the exact matched text afterwards.
Over-matching is accepted.
"""
import re
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Iterator, Optional

from .domain import Filing, GuidanceCandidate, GuidanceItem
from .numeric import extract_range, extract_value

MAX_CANDIDATES_PER_DOCUMENT = 10
MAX_10K_CANDIDATES_PER_DOCUMENT = 15
MAX_GUIDANCE_ITEMS = 20

_AMOUNT_OR_PERCENT = r"(?:\$[\d,.]+ (?:million|billion)|[\d.]+%)"


@dataclass(frozen=True)
class CategoryRule:
    category: str
    keywords: tuple[str, ...]


# Checked in order, first rule with a keyword in the lowercased text wins
CATEGORY_RULES = (
    CategoryRule("revenue", ("revenue", "sales")),
    CategoryRule("earnings", ("earnings", "eps", "income")),
    CategoryRule("margin", ("margin",)),
    CategoryRule("capex", ("capex", "capital expenditure")),
)

ANNUAL_CATEGORY_RULES = (
    CategoryRule("revenue", ("revenue", "sales", "top line")),
    CategoryRule("earnings", ("earnings", "eps", "net income", "bottom line")),
    CategoryRule("margin", ("margin", "profitability")),
    CategoryRule("capex", ("capex", "capital expenditure", "capital investment")),
    CategoryRule("operational", ("operating leverage", "efficiency", "cost")),
    CategoryRule("growth", ("growth", "expansion", "market")),
    CategoryRule("strategic", ("strategic", "long-term", "multi-year")),
)


def categorize(text: str, rules: Iterable[CategoryRule] = CATEGORY_RULES) -> str:
    lowered = text.lower()
    for rule in rules:
        if any(keyword in lowered for keyword in rule.keywords):
            return rule.category
    return "other"


class LinePattern:
    """
    Tokens matched in order within a single line, lazily skipping anything between.

    Matches exactly what re.finditer over ".*?".join(tokens) finds without
    DOTALL, since "." never crosses a newline. A line is only searched when it
    holds every token, and only up to the end of its last closing token, so a
    long line full of openers that never close is not backtracked over.
    """

    def __init__(self, *tokens: str, flags: int = re.IGNORECASE):
        self.tokens = tokens
        self.regex = re.compile(".*?".join(f"(?:{token})" for token in tokens), flags)
        self._required = [re.compile(token, flags) for token in tokens]
        self._closing = re.compile(f"(?=({tokens[-1]}))", flags)

    def finditer(self, line: str) -> Iterator[re.Match]:
        if not all(token.search(line) for token in self._required):
            return iter(())
        endpos = max(match.end(1) for match in self._closing.finditer(line))
        return self.regex.finditer(line, 0, endpos)


GUIDANCE_PATTERNS = [
    # Guidance verb paired with a financial noun
    LinePattern(
        r"guidance|outlook|forecast|expect|anticipate|project|estimate",
        r"revenue|sales|earnings|income|margin|profit",
    ),
    # Fiscal period marker paired with a dollar amount or percentage
    LinePattern(
        r"fiscal year|FY|quarterly|Q[1-4]",
        r"\$[\d,.]+ (?:million|billion)|[\d.]+% (?:growth|increase|decrease)",
    ),
    # Management commitment paired with a magnitude or range clause
    LinePattern(
        r"we expect|we anticipate|we project|we estimate|management expects|management anticipates",
        r"to be|will be|range|between",
        _AMOUNT_OR_PERCENT,
    ),
]

ANNUAL_REPORT_PATTERNS = [
    # Annual outlook
    LinePattern(
        r"for (?:fiscal )?(?:year|FY) [\d]{4}|in [\d]{4}|next (?:fiscal )?year",
        r"we expect|we anticipate|we project|expected|anticipated|projected",
        r"revenue|sales|earnings|income|margin|growth",
        r"to be|will be|range|between|approximately|about",
        _AMOUNT_OR_PERCENT,
    ),
    # Strategic / long-term targets
    LinePattern(
        r"strategic|long[- ]?term|multi[- ]?year",
        r"plan|initiative|goal|target|objective",
        r"revenue|growth|margin|profitability",
        _AMOUNT_OR_PERCENT,
    ),
    # Capital expenditure
    LinePattern(
        r"capital expenditure|capex|capital investment",
        r"expect|anticipate|plan|budget",
        r"\$[\d,.]+ (?:million|billion)",
    ),
    # Operating leverage and efficiency
    LinePattern(
        r"operating leverage|efficiency|cost reduction|margin expansion",
        r"expect|target|plan",
        r"[\d.]+%|basis points|bps",
    ),
    # Market expansion
    LinePattern(
        r"market expansion|growth strategy|addressable market",
        r"expect|target|plan",
        r"revenue|growth|market share",
        _AMOUNT_OR_PERCENT,
    ),
]

MDA_SECTION_PATTERNS = [
    re.compile(r"item 7\..*?management['\s]*s discussion and analysis.*?item 8\.", re.IGNORECASE | re.DOTALL),
    re.compile(r"management['\s]*s discussion and analysis.*?(?=item \d+|item [ivx]+)", re.IGNORECASE | re.DOTALL),
]

MDA_GUIDANCE_PATTERNS = [
    LinePattern(
        r"looking forward|going forward|in the coming year|for the next fiscal year",
        r"we expect|we anticipate|we believe",
        _AMOUNT_OR_PERCENT,
    ),
    LinePattern(r"our outlook|business outlook|financial outlook", _AMOUNT_OR_PERCENT),
    LinePattern(
        r"management believes|management expects|management anticipates",
        r"revenue|earnings|margin|growth",
        _AMOUNT_OR_PERCENT,
    ),
]


FISCAL_YEAR_PATTERNS = [
    re.compile(r"fiscal year ended (?:december 31, |march 31, |june 30, |september 30, )?(\d{4})", re.IGNORECASE),
    re.compile(r"year ended (?:december 31, |march 31, |june 30, |september 30, )?(\d{4})", re.IGNORECASE),
    re.compile(r"for the (?:fiscal )?year (\d{4})", re.IGNORECASE),
]


def context_window(text: str, start: int, end: int, radius: int = 100) -> str:
    """Excerpt around [start, end) clipped to the text bounds"""
    return text[max(0, start - radius):min(len(text), end + radius)].strip()


def iter_lines(text: str) -> Iterator[tuple[int, str]]:
    """(offset, line) pairs, split on newlines only"""
    offset = 0
    for line in text.split("\n"):
        yield offset, line
        offset += len(line) + 1


def dedupe_by_text(candidates: Iterable[GuidanceCandidate]) -> list[GuidanceCandidate]:
    """Keep the first candidate for each exact matched text"""
    seen = set()
    unique = []
    for candidate in candidates:
        if candidate.matched_text not in seen:
            seen.add(candidate.matched_text)
            unique.append(candidate)
    return unique


class GuidancePatternExtractor:
    """Scan filing text for candidate guidance statements"""

    def __init__(
        self,
        patterns: Optional[list[LinePattern]] = None,
        categorizer: Callable[[str], str] = categorize,
        context_radius: int = 100,
        max_candidates: int = MAX_CANDIDATES_PER_DOCUMENT
    ):
        self.patterns = patterns if patterns is not None else GUIDANCE_PATTERNS
        self.categorizer = categorizer
        self.context_radius = context_radius
        self.max_candidates = max_candidates

    def scan(self, text: str, source_form: str) -> list[GuidanceCandidate]:
        """All raw matches, pattern by pattern, before deduplication"""
        candidates = []
        lines = list(iter_lines(text))
        for pattern in self.patterns:
            for offset, line in lines:
                for match in pattern.finditer(line):
                    matched = match.group(0).strip()
                    if not matched:
                        continue
                    start, end = offset + match.start(), offset + match.end()
                    candidates.append(GuidanceCandidate(
                        matched_text=matched,
                        context_window=context_window(text, start, end, self.context_radius),
                        category=self.categorizer(matched),
                        source_form=source_form
                    ))
        return candidates

    def extract(self, text: str, source_form: str) -> list[GuidanceCandidate]:
        """Deduplicated candidates in scan order, capped per document"""
        return dedupe_by_text(self.scan(text, source_form))[:self.max_candidates]


def _categorize_annual(text: str) -> str:
    return categorize(text, ANNUAL_CATEGORY_RULES)


def extract_mda_section(text: str) -> Optional[str]:
    """Management's Discussion & Analysis section, if it can be located"""
    for pattern in MDA_SECTION_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0)
    return None


class AnnualReportGuidanceExtractor:
    """
    Guidance extraction tuned for 10-K annual reports.

    Runs the annual patterns over the whole document with a wider context
    window, then the MD&A patterns over the MD&A section alone.
    """

    def __init__(self, max_candidates: int = MAX_10K_CANDIDATES_PER_DOCUMENT):
        self.max_candidates = max_candidates
        self.document = GuidancePatternExtractor(
            patterns=ANNUAL_REPORT_PATTERNS,
            categorizer=_categorize_annual,
            context_radius=150
        )
        self.mda = GuidancePatternExtractor(
            patterns=MDA_GUIDANCE_PATTERNS,
            categorizer=_categorize_annual
        )

    def extract(self, text: str, source_form: str = "10-K") -> list[GuidanceCandidate]:
        candidates = self.document.scan(text, source_form)
        mda_text = extract_mda_section(text)
        if mda_text:
            candidates.extend(self.mda.scan(mda_text, source_form))
        return dedupe_by_text(candidates)[:self.max_candidates]


def _parse_filing_date(filing_date: str) -> Optional[date]:
    try:
        return date.fromisoformat(filing_date[:10])
    except (TypeError, ValueError):
        return None


def period_label(filing_type: str, filing_date: str) -> str:
    """
    Human period label for a filing.

    Example:
        period_label("10-K", "2024-02-01") → "FY2024"
        period_label("10-Q", "2024-05-03") → "Q2 2024"
        period_label("8-K", "2024-05-03") → "Current Period"
    """
    filed = _parse_filing_date(filing_date)
    form = filing_type.upper()
    if filed is None:
        return "Current Period"
    if form == "10-K":
        return f"FY{filed.year}"
    if form == "10-Q":
        return f"Q{(filed.month - 1) // 3 + 1} {filed.year}"
    return "Current Period"


def estimate_fiscal_year(filing_date: str, text: str) -> str:
    """
    Fiscal year covered by an annual report.

    Uses the first "fiscal year ended ... YYYY" style phrase in the text,
    otherwise assumes the year before the filing. Without a usable filing
    date it falls back to "Current Period", as period_label does.
    """
    for pattern in FISCAL_YEAR_PATTERNS:
        match = pattern.search(text)
        if match:
            return f"FY{match.group(1)}"
    filed = _parse_filing_date(filing_date)
    if filed is None:
        return "Current Period"
    return f"FY{filed.year - 1}"


class GuidanceAssembler:
    """Turn candidates into caller-facing guidance items"""

    def __init__(self, max_items: int = MAX_GUIDANCE_ITEMS):
        self.max_items = max_items
        self._items: list[GuidanceItem] = []
        self._seen: set[str] = set()

    def add(
        self,
        candidates: Iterable[GuidanceCandidate],
        filing_date: str,
        period: str,
        url: Optional[str] = None
    ) -> None:
        for candidate in candidates:
            if candidate.matched_text in self._seen:
                continue
            self._seen.add(candidate.matched_text)
            self._items.append(GuidanceItem(
                guidance_type=candidate.category,
                period=period,
                guidance=candidate.matched_text,
                value=extract_value(candidate.matched_text),
                value_range=extract_range(candidate.matched_text),
                source=candidate.source_form,
                filing_date=filing_date,
                url=url,
                context=candidate.context_window
            ))

    def add_filing(self, filing: Filing, candidates: Iterable[GuidanceCandidate], period: Optional[str] = None) -> None:
        self.add(
            candidates,
            filing_date=filing.filing_date,
            period=period or period_label(filing.form_type, filing.filing_date),
            url=filing.sec_url
        )

    @property
    def items(self) -> list[GuidanceItem]:
        """Unique items in discovery order, capped"""
        return self._items[:self.max_items]
