"""
Tests for guidance pattern extraction and assembly
"""
import time

from mcp_stock_signals.core.domain import Filing, GuidanceCandidate, ValueRange
from mcp_stock_signals.core.guidance import (
    ANNUAL_CATEGORY_RULES,
    ANNUAL_REPORT_PATTERNS,
    GUIDANCE_PATTERNS,
    MDA_GUIDANCE_PATTERNS,
    AnnualReportGuidanceExtractor,
    GuidanceAssembler,
    GuidancePatternExtractor,
    LinePattern,
    categorize,
    context_window,
    dedupe_by_text,
    estimate_fiscal_year,
    extract_mda_section,
    iter_lines,
    period_label,
)


def candidate(text, category="revenue", form="10-Q"):
    return GuidanceCandidate(matched_text=text, context_window=text, category=category, source_form=form)


class TestCategorize:
    """Keyword categories, first rule wins."""

    def test_revenue(self):
        assert categorize("expect revenue growth") == "revenue"
        assert categorize("Net Sales outlook") == "revenue"

    def test_earnings(self):
        assert categorize("EPS of $2.10") == "earnings"
        assert categorize("operating income") == "earnings"

    def test_margin(self):
        assert categorize("gross margin of 40%") == "margin"

    def test_capex(self):
        assert categorize("capital expenditure of $2 billion") == "capex"

    def test_rule_order(self):
        assert categorize("sales margin") == "revenue"
        assert categorize("margin on income") == "earnings"

    def test_other(self):
        assert categorize("headcount to be flat") == "other"

    def test_annual_rules(self):
        assert categorize("cost reduction program", ANNUAL_CATEGORY_RULES) == "operational"
        assert categorize("multi-year roadmap", ANNUAL_CATEGORY_RULES) == "strategic"
        assert categorize("expansion into Europe", ANNUAL_CATEGORY_RULES) == "growth"
        assert categorize("improved profitability", ANNUAL_CATEGORY_RULES) == "margin"


class TestContextWindow:
    """Excerpts around a match."""

    def test_radius(self):
        assert context_window("abcdefghij", 4, 6, radius=2) == "cdefgh"

    def test_clipped_to_bounds(self):
        assert context_window("abcdefghij", 1, 9, radius=5) == "abcdefghij"

    def test_stripped(self):
        assert context_window("   abc   ", 3, 6, radius=3) == "abc"


class TestGuidancePatternExtractor:
    """Scanning filing text for candidates."""

    def test_guidance_verb_with_financial_noun(self):
        extractor = GuidancePatternExtractor()
        candidates = extractor.extract("We expect revenue of $1.5 billion for the year.", "10-Q")

        assert [c.matched_text for c in candidates] == ["expect revenue"]
        assert candidates[0].category == "revenue"
        assert candidates[0].source_form == "10-Q"
        assert "$1.5 billion" in candidates[0].context_window

    def test_management_commitment_with_amount(self):
        extractor = GuidancePatternExtractor()
        candidates = extractor.extract("We expect revenue to be between $10 million and $15 million.", "8-K")

        texts = [c.matched_text for c in candidates]
        assert "expect revenue" in texts
        assert "We expect revenue to be between $10 million" in texts

    def test_fiscal_period_with_percent_change(self):
        extractor = GuidancePatternExtractor()
        candidates = extractor.extract("In FY2025 we see 5% to 7% growth in sales.", "10-K")

        assert [c.matched_text for c in candidates] == ["FY2025 we see 5% to 7% growth"]
        assert candidates[0].category == "other"

    def test_duplicates_collapsed(self):
        extractor = GuidancePatternExtractor()
        text = "We expect revenue growth. Later we repeat: we expect revenue growth."

        assert len(extractor.scan(text, "10-Q")) == 2
        assert len(extractor.extract(text, "10-Q")) == 1

    def test_capped_per_document(self):
        extractor = GuidancePatternExtractor()
        text = " ".join(f"We anticipate {i} units of sales." for i in range(12))

        assert len(extractor.scan(text, "10-Q")) == 12
        candidates = extractor.extract(text, "10-Q")
        assert len(candidates) == 10
        assert candidates[0].matched_text == "anticipate 0 units of sales"

    def test_no_guidance(self):
        extractor = GuidancePatternExtractor()
        assert extractor.extract("The company was incorporated in Delaware.", "10-K") == []

    def test_dedupe_keeps_first(self):
        first = candidate("expect revenue", category="revenue", form="10-Q")
        second = candidate("expect revenue", category="other", form="8-K")
        assert dedupe_by_text([first, second]) == [first]


class TestLinePattern:
    """Line-by-line matching of ordered tokens."""

    SAMPLE = (
        "Outlook. We expect revenue to be between $10 million and $15 million.\n"
        "For fiscal year 2025, we expect revenue growth to be approximately 8%.\n"
        "Capital expenditure: we plan to spend $2 billion. Q3 saw $400 million in sales.\n"
        "Our long-term plan targets margin of 30% and operating efficiency we target at 200 bps.\n"
        "Management expects earnings growth of 12%. Going forward, we believe 5% is achievable.\n"
        "We expect demand to be stable.\n"
    )

    def test_same_matches_as_joined_regex(self):
        """Per-line results equal a whole-text finditer with the joined regex."""
        for pattern in GUIDANCE_PATTERNS + ANNUAL_REPORT_PATTERNS + MDA_GUIDANCE_PATTERNS:
            by_line = [
                (offset + match.start(), offset + match.end())
                for offset, line in iter_lines(self.SAMPLE)
                for match in pattern.finditer(line)
            ]
            whole = [match.span() for match in pattern.regex.finditer(self.SAMPLE)]
            assert by_line == whole, pattern.tokens

    def test_line_without_closing_token_skipped(self):
        pattern = LinePattern("we expect", "to be", r"[\d.]+%")
        assert list(pattern.finditer("We expect demand to be stable.")) == []

    def test_stops_at_last_closing_token(self):
        pattern = LinePattern("we expect", "to be", r"\$[\d,.]+ (?:million|billion)")
        line = "We expect revenue to be $5 million. We expect cost to be lower."

        assert [m.group(0) for m in pattern.finditer(line)] == ["We expect revenue to be $5 million"]

    def test_iter_lines_offsets(self):
        text = "ab\ncd\n\nef"
        assert list(iter_lines(text)) == [(0, "ab"), (3, "cd"), (6, ""), (7, "ef")]
        for offset, line in iter_lines(text):
            assert text[offset:offset + len(line)] == line

    def test_context_window_spans_lines(self):
        """Offsets map back into the whole text for the excerpt."""
        text = "Prior year recap.\nWe expect revenue of $1.5 billion."
        candidate = GuidancePatternExtractor(context_radius=5).extract(text, "10-Q")[0]

        assert candidate.matched_text == "expect revenue"
        assert candidate.context_window == ".\nWe expect revenue of $"


class TestLongSingleLineDocuments:
    """Long flattened filings with many openers and no closing amount."""

    def test_repeated_expectations_without_amount(self):
        text = "We expect demand to be stable and cost to be lower. " * 2000

        started = time.perf_counter()
        assert GuidancePatternExtractor().extract(text, "10-K") == []
        assert AnnualReportGuidanceExtractor().extract(text) == []
        assert time.perf_counter() - started < 2.0

    def test_amount_only_before_the_openers(self):
        text = "Revenue was $5 million. " + "We expect demand to be stable and cost to be lower. " * 2000

        started = time.perf_counter()
        assert GuidancePatternExtractor().extract(text, "10-K") == []
        assert AnnualReportGuidanceExtractor().extract(text) == []
        assert time.perf_counter() - started < 2.0

    def test_match_at_the_end_still_found(self):
        text = "We expect demand to be stable. " * 2000 + "We expect revenue to be $3 billion."

        started = time.perf_counter()
        candidates = GuidancePatternExtractor().extract(text, "10-Q")
        assert time.perf_counter() - started < 2.0

        assert candidates[-1].matched_text.startswith("We expect demand to be stable.")
        assert candidates[-1].matched_text.endswith("We expect revenue to be $3 billion")


class TestAnnualReportExtraction:
    """10-K specific patterns and MD&A."""

    REPORT = (
        "Item 1. Business. We make widgets.\n"
        "Item 7. Management's Discussion and Analysis of Financial Condition.\n"
        "Looking forward, we expect gross margin of 42%.\n"
        "Item 8. Financial Statements and Supplementary Data.\n"
    )

    def test_mda_section_located(self):
        section = extract_mda_section(self.REPORT)
        assert section.startswith("Item 7.")
        assert "Looking forward" in section
        assert section.endswith("Item 8.")

    def test_mda_section_missing(self):
        assert extract_mda_section("Item 1. Business. We make widgets.") is None

    def test_mda_guidance(self):
        candidates = AnnualReportGuidanceExtractor().extract(self.REPORT)

        assert [c.matched_text for c in candidates] == ["Looking forward, we expect gross margin of 42%"]
        assert candidates[0].category == "margin"
        assert candidates[0].source_form == "10-K"

    def test_capex_plan(self):
        text = "Capital expenditure plans: we expect to invest $2 billion in new fabs."
        candidates = AnnualReportGuidanceExtractor().extract(text)

        assert len(candidates) == 1
        assert candidates[0].matched_text == "Capital expenditure plans: we expect to invest $2 billion"
        assert candidates[0].category == "capex"

    def test_capped(self):
        text = " ".join(f"Our outlook calls for {i}.5% more." for i in range(20))
        report = "Item 7. Management's Discussion and Analysis. " + text + " Item 8."
        assert len(AnnualReportGuidanceExtractor().extract(report)) == 15


class TestPeriodLabel:
    """Period labels from form type and filing date."""

    def test_annual(self):
        assert period_label("10-K", "2024-02-01") == "FY2024"

    def test_quarterly(self):
        assert period_label("10-Q", "2024-05-03") == "Q2 2024"
        assert period_label("10-q", "2024-12-15") == "Q4 2024"
        assert period_label("10-Q", "2024-01-31") == "Q1 2024"

    def test_other_forms(self):
        assert period_label("8-K", "2024-05-03") == "Current Period"

    def test_unparseable_date(self):
        assert period_label("10-K", "n/a") == "Current Period"


class TestEstimateFiscalYear:
    """Fiscal year of a 10-K."""

    def test_from_text(self):
        text = "Annual report for the fiscal year ended December 31, 2023."
        assert estimate_fiscal_year("2024-02-01", text) == "FY2023"

    def test_year_ended(self):
        assert estimate_fiscal_year("2024-08-01", "for the year ended June 30, 2024") == "FY2024"

    def test_fallback_to_prior_year(self):
        assert estimate_fiscal_year("2024-02-01", "no dates here") == "FY2023"

    def test_unparseable_filing_date(self):
        assert estimate_fiscal_year("n/a", "no dates here") == "Current Period"
        assert estimate_fiscal_year(None, "no dates here") == "Current Period"


class TestGuidanceAssembler:
    """Enrichment, cross-filing dedup and the item cap."""

    def test_values_parsed_from_matched_text(self):
        assembler = GuidanceAssembler()
        assembler.add(
            [candidate("FY2025 we see 5% to 7% growth"), candidate("expect $2 billion in sales")],
            filing_date="2024-05-03",
            period="Q2 2024"
        )

        growth, sales = assembler.items
        assert growth.value == 5.0
        assert growth.value_range == ValueRange(min=5.0, max=7.0)
        assert sales.value == 2_000_000_000.0
        assert sales.value_range is None
        assert sales.period == "Q2 2024"
        assert sales.filing_date == "2024-05-03"

    def test_dedup_across_filings(self):
        assembler = GuidanceAssembler()
        assembler.add([candidate("expect revenue")], filing_date="2024-05-03", period="Q2 2024")
        assembler.add([candidate("expect revenue"), candidate("expect income")],
                      filing_date="2024-02-01", period="FY2024")

        items = assembler.items
        assert [i.guidance for i in items] == ["expect revenue", "expect income"]
        assert items[0].filing_date == "2024-05-03"

    def test_capped(self):
        assembler = GuidanceAssembler()
        assembler.add([candidate(f"statement {i}") for i in range(25)], filing_date="2024-05-03", period="Q2 2024")

        assert len(assembler.items) == 20
        assert assembler.items[-1].guidance == "statement 19"

    def test_add_filing_labels_period_and_url(self):
        filing = Filing(
            ticker="ACME",
            form_type="10-Q",
            filing_date="2024-05-03",
            accession_number="0001",
            sec_url="https://www.sec.gov/0001.htm"
        )
        assembler = GuidanceAssembler()
        assembler.add_filing(filing, [candidate("expect revenue")])

        item = assembler.items[0]
        assert item.period == "Q2 2024"
        assert item.url == "https://www.sec.gov/0001.htm"
        assert item.source == "10-Q"
