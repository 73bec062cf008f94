"""
BBG Lite formatters for MCP tool results

Format handler results as Bloomberg Terminal-inspired text output.
Used by both CLI and MCP adapters for consistent presentation.
"""
from typing import Any, Optional

RULE = "─" * 70
DOUBLE_RULE = "═" * 70

STATUS_LABELS = {
    "profit_turnaround": "PROFIT TURNAROUND (loss → profit)",
    "loss_turnaround": "LOSS TURNAROUND (profit → loss)",
    "continued_profit": "CONTINUED PROFIT",
    "continued_loss": "CONTINUED LOSS",
}


def format_money(value: Optional[float]) -> str:
    """$1.2B / $340.0M / $12,345 style, N/A for missing"""
    if value is None:
        return "N/A"
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    if magnitude >= 1_000_000_000_000:
        return f"{sign}${magnitude / 1_000_000_000_000:.2f}T"
    if magnitude >= 1_000_000_000:
        return f"{sign}${magnitude / 1_000_000_000:.2f}B"
    if magnitude >= 1_000_000:
        return f"{sign}${magnitude / 1_000_000:.1f}M"
    return f"{sign}${magnitude:,.0f}"


def format_percent(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return f"{value:+.1f}%"


def _number(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return f"{value:,.2f}"


def format_stock_price(result: dict[str, Any]) -> str:
    """Format get_stock_price result as BBG Lite text.

    Example output:
        AAPL | 189.84 USD | +1.23 (+0.65%)

        MKT CAP:     $2.95T
        VOLUME:      48,123,456
    """
    if not result.get("success"):
        return f"ERROR: {result.get('error', 'Unknown error')}"

    lines = [_quote_line(result), ""]
    lines.append(f"MKT CAP:     {format_money(result.get('market_cap'))}")
    volume = result.get('volume')
    lines.append(f"VOLUME:      {volume:,}" if volume is not None else "VOLUME:      N/A")
    lines.append(f"AS OF:       {result.get('timestamp', 'N/A')}")
    return "\n".join(lines)


def _quote_line(quote: dict[str, Any]) -> str:
    change = quote.get('change')
    change_str = f"{change:+.2f} ({format_percent(quote.get('change_percent'))})" if change is not None else "N/A"
    return f"{quote['symbol'].upper()} | {quote['price']:,.2f} {quote.get('currency', 'USD')} | {change_str}"


def format_multiple_stock_prices(result: dict[str, Any]) -> str:
    if not result.get("success"):
        return f"ERROR: {result.get('error', 'Unknown error')}"

    lines = [f"QUOTES ({result['count']})", RULE]
    for quote in result['quotes']:
        lines.append(_quote_line(quote))
    return "\n".join(lines)


def format_financial_data(result: dict[str, Any]) -> str:
    """Format get_financial_data result as a two-column metric table."""
    if not result.get("success"):
        return f"ERROR: {result.get('error', 'Unknown error')}"

    lines = []
    name = result.get('company_name') or 'N/A'
    lines.append(f"{result['symbol'].upper()} ({name}) | FUNDAMENTALS")
    lines.append(RULE)

    money_metrics = {
        "market_cap", "enterprise_value", "total_revenue", "gross_profit", "ebitda",
        "net_income_to_common", "total_cash", "total_debt", "operating_cash_flow",
        "levered_free_cash_flow",
    }
    for metric, value in result['metrics'].items():
        label = metric.replace("_", " ").upper()
        rendered = format_money(value) if metric in money_metrics else _number(value)
        lines.append(f"{label:<28} {rendered:>18}")

    return "\n".join(lines)


def _format_eps(value: Optional[float]) -> str:
    return "N/A" if value is None else f"{value:.2f}"


def format_turnaround(result: dict[str, Any]) -> str:
    """Format analyze_profitability_turnaround result as BBG Lite text.

    Example output:
        PLTR (Palantir) | PROFIT TURNAROUND (loss → profit)

                               CURRENT        PREVIOUS
        ──────────────────────────────────────────────────────────────────────
        Period              2024-03-31      2023-12-31
        Net Income             $105.5M        -$12.0M
        Operating Income        $81.0M        -$20.0M
        EPS                       0.05           -0.02

        QoQ CHANGE:  +979.2%
        MKT CAP:     $52.10B
    """
    if not result.get("success"):
        return f"ERROR: {result.get('error', 'Unknown error')}"

    lines = []
    name = f" ({result['company_name']})" if result.get('company_name') else ""
    status = STATUS_LABELS.get(result['status'], result['status'])
    lines.append(f"{result['symbol'].upper()}{name} | {status}")
    lines.append("")
    lines.append(f"{'':<20}{'CURRENT':>16}{'PREVIOUS':>16}")
    lines.append(RULE)
    lines.append(f"{'Period':<20}{result.get('current_period') or 'N/A':>16}{result.get('previous_period') or 'N/A':>16}")
    lines.append(
        f"{'Net Income':<20}{format_money(result['current_net_income']):>16}"
        f"{format_money(result['previous_net_income']):>16}"
    )
    lines.append(
        f"{'Operating Income':<20}{format_money(result['current_operating_income']):>16}"
        f"{format_money(result['previous_operating_income']):>16}"
    )
    if result.get("current_eps") is not None or result.get("previous_eps") is not None:
        lines.append(f"{'EPS':<20}{_format_eps(result.get('current_eps')):>16}{_format_eps(result.get('previous_eps')):>16}")
    lines.append("")
    lines.append(f"QoQ CHANGE:  {format_percent(result.get('quarterly_change'))}")
    lines.append(f"MKT CAP:     {format_money(result.get('market_cap'))}")
    return "\n".join(lines)


def format_screen(result: dict[str, Any]) -> str:
    """Format screen_profit_turnaround_stocks result as a ranked table."""
    if not result.get("success"):
        return f"ERROR: {result.get('error', 'Unknown error')}"

    lines = []
    lines.append(f"PROFIT TURNAROUND SCREEN | {result['count']} of {result['screened']} symbols")
    bounds = []
    if result.get('min_market_cap') is not None:
        bounds.append(f"min {format_money(result['min_market_cap'])}")
    if result.get('max_market_cap') is not None:
        bounds.append(f"max {format_money(result['max_market_cap'])}")
    if bounds:
        lines.append(f"MKT CAP: {', '.join(bounds)}")
    lines.append("")

    if not result['results']:
        lines.append("NO TURNAROUNDS FOUND")
        return "\n".join(lines)

    lines.append(f"{'#':<4}{'SYMBOL':<10}{'NET INCOME':>14}{'PRIOR':>14}{'QoQ':>12}{'MKT CAP':>14}")
    lines.append(RULE)
    for rank, row in enumerate(result['results'], 1):
        lines.append(
            f"{rank:<4}{row['symbol'].upper():<10}"
            f"{format_money(row['current_net_income']):>14}"
            f"{format_money(row['previous_net_income']):>14}"
            f"{format_percent(row.get('quarterly_change')):>12}"
            f"{format_money(row.get('market_cap')):>14}"
        )
    lines.append("")
    lines.append('Try: analyze_profitability_turnaround("SYMBOL") for detail')
    return "\n".join(lines)


def format_earnings_forecast(result: dict[str, Any]) -> str:
    if not result.get("success"):
        return f"ERROR: {result.get('error', 'Unknown error')}"

    lines = []
    lines.append(f"{result['symbol'].upper()} | {result['horizon'].upper()} EARNINGS FORECAST")
    lines.append(RULE)
    lines.append(f"{'PERIOD':<22}{'EPS':>10}{'LOW':>10}{'HIGH':>10}{'REVENUE':>14}{'#':>4}")
    for item in result['forecasts']:
        analysts = item.get('analyst_count')
        lines.append(
            f"{item['period']:<22}{_number(item.get('earnings_per_share')):>10}"
            f"{_number(item.get('eps_low')):>10}{_number(item.get('eps_high')):>10}"
            f"{format_money(item.get('revenue')):>14}{analysts if analysts is not None else '-':>4}"
        )
    return "\n".join(lines)


def _guidance_value(item: dict[str, Any]) -> str:
    value_range = item.get('value_range')
    if value_range and (value_range.get('min') is not None or value_range.get('max') is not None):
        return f"{_figure(value_range.get('min'), item)} – {_figure(value_range.get('max'), item)}"
    if item.get('value') is not None:
        return _figure(item['value'], item)
    return "N/A"


def _figure(value: Optional[float], item: dict[str, Any]) -> str:
    if value is None:
        return "N/A"
    # Unscaled small numbers next to a % sign are percentages
    if "%" in item.get('guidance', '') and abs(value) < 1000:
        return f"{value:g}%"
    return format_money(value)


def _guidance_item_lines(items: list[dict[str, Any]]) -> list[str]:
    lines = []
    for i, item in enumerate(items, 1):
        lines.append("")
        lines.append(
            f"[{i}] {item['guidance_type'].upper()} | {item['period']} | "
            f"{item['source']} filed {item['filing_date']}"
        )
        lines.append(f"    VALUE: {_guidance_value(item)}")
        lines.append(f'    "{item["guidance"]}"')
        if item.get('url'):
            lines.append(f"    {item['url']}")
    return lines


def format_guidance(result: dict[str, Any]) -> str:
    """Format guidance results as BBG Lite text.

    Example output:
        AAPL (Apple Inc.) | MANAGEMENT GUIDANCE | 3 statements from 5 filings
        ══════════════════════════════════════════════════════════════════════

        [1] REVENUE | Q2 2024 | 10-Q filed 2024-05-03
            VALUE: $90.00B – $94.00B
            "we expect revenue to be between $90 billion and $94 billion"
            https://www.sec.gov/Archives/edgar/data/...
    """
    if not result.get("success"):
        return f"ERROR: {result.get('error', 'Unknown error')}"

    lines = []
    if result.get('symbol'):
        name = f" ({result['company_name']})" if result.get('company_name') else ""
        header = f"{result['symbol'].upper()}{name} | MANAGEMENT GUIDANCE | {result['count']} statements"
        if result.get('filings_examined'):
            header += f" from {result['filings_examined']} filings"
            if result.get('filings_failed'):
                header += f" ({result['filings_failed']} unreadable)"
    else:
        header = f"{result.get('filing_type', '').upper()} TEXT | GUIDANCE | {result['count']} statements"
    lines.append(header)
    lines.append(DOUBLE_RULE)

    lines.extend(_guidance_item_lines(result['guidances']))
    return "\n".join(lines)


def _format_size(size: int) -> str:
    if size >= 1024 * 1024:
        return f"{size / (1024 * 1024):.1f} MB"
    return f"{size / 1024:.1f} KB"


def format_pdf_document(result: dict[str, Any]) -> str:
    """Format extract_ir_document / extract_local_pdf results as BBG Lite text.

    Example output:
        AAPL | EARNINGS PRESENTATION (US) | 24 pages | 1.2 MB
        ══════════════════════════════════════════════════════════════════════
        SOURCE:     https://investor.example.com/q2.pdf
        WORDS:      12,345 | FINANCIAL TERMS: yes
        EXTRACTED:  2024-05-03T12:00:00+00:00 in 850ms

        GUIDANCE | 1 statements

        [1] REVENUE | Current Period | earnings_presentation filed 2024-05-03
            VALUE: $90.00B
            "We expect revenue to be $90 billion"

        TEXT
        ──────────────────────────────────────────────────────────────────────
        Second quarter results ...
    """
    if not result.get("success"):
        return f"ERROR: {result.get('error', 'Unknown error')}"

    document_type = result['document_type'].replace("_", " ").upper()
    lines = [
        f"{result['symbol'].upper()} | {document_type} ({result['country']}) | "
        f"{result['page_count']} pages | {_format_size(result['document_size'])}",
        DOUBLE_RULE,
        f"SOURCE:     {result['source']}",
        f"WORDS:      {result['word_count']:,} | "
        f"FINANCIAL TERMS: {'yes' if result['contains_financial_data'] else 'no'}",
        f"EXTRACTED:  {result['extraction_date']} in {result['processing_time_ms']}ms",
    ]

    if result.get('guidances'):
        lines.append("")
        lines.append(f"GUIDANCE | {len(result['guidances'])} statements")
        lines.extend(_guidance_item_lines(result['guidances']))

    lines.append("")
    lines.append("TEXT")
    lines.append(RULE)
    lines.append(result['text'] or "(no extractable text)")
    return "\n".join(lines)


FORMATTERS = {
    "get_stock_price": format_stock_price,
    "get_multiple_stock_prices": format_multiple_stock_prices,
    "get_financial_data": format_financial_data,
    "analyze_profitability_turnaround": format_turnaround,
    "screen_profit_turnaround_stocks": format_screen,
    "get_quarterly_earnings_forecast": format_earnings_forecast,
    "get_annual_earnings_forecast": format_earnings_forecast,
    "get_earnings_guidance": format_guidance,
    "get_10k_earnings_guidance": format_guidance,
    "extract_guidance_from_text": format_guidance,
    "extract_ir_document": format_pdf_document,
    "extract_local_pdf": format_pdf_document,
}
