"""
EDGAR Adapter

Implements FilingFetcher port using edgartools library.
"""
import logging

from edgar import Company, set_identity
from httpx import TimeoutException

from ..core.domain import Filing
from ..core.ports import FilingFetcher

logger = logging.getLogger(__name__)


def _date_str(filing_date) -> str:
    if hasattr(filing_date, 'strftime'):
        return filing_date.strftime('%Y-%m-%d')
    if hasattr(filing_date, 'date'):
        return filing_date.date().strftime('%Y-%m-%d')
    return str(filing_date)


def _rate_limit_error(e: Exception) -> bool:
    error_msg = str(e).lower()
    return "429" in error_msg or "too many requests" in error_msg


class EdgarAdapter(FilingFetcher):
    """EDGAR filing fetcher using edgartools"""

    def __init__(self, user_agent: str):
        set_identity(user_agent)
        logging.getLogger("edgar").setLevel(logging.WARNING)

    def _to_domain(self, edgar_filing, ticker: str) -> Filing:
        return Filing(
            ticker=ticker.upper(),
            form_type=edgar_filing.form,
            filing_date=_date_str(edgar_filing.filing_date),
            accession_number=edgar_filing.accession_number,
            sec_url=edgar_filing.url,
            company_name=getattr(edgar_filing, 'company', None),
            cik=str(edgar_filing.cik) if hasattr(edgar_filing, 'cik') else None
        )

    def list_recent(self, ticker: str, form_types: list[str], limit: int) -> list[Filing]:
        """Most recent filings of the given forms, newest first (amendments excluded)"""
        try:
            company = Company(ticker)
            edgar_filings = company.get_filings(form=form_types, amendments=False)
        except TimeoutException as e:
            raise ValueError(
                f"SEC.gov timeout: SEC EDGAR is responding slowly. "
                f"Try again in a moment. Error: {str(e)}"
            )
        except Exception as e:
            if _rate_limit_error(e):
                raise ValueError(
                    f"Rate limited by SEC.gov: You've exceeded the 10 requests/second limit. "
                    f"Wait a moment and try again. Error: {str(e)}"
                )
            raise

        if not edgar_filings:
            return []

        result = [self._to_domain(f, ticker) for f in edgar_filings.head(limit)]
        result.sort(key=lambda x: x.filing_date, reverse=True)
        return result

    def fetch_text(self, filing: Filing) -> str:
        """Download filing content from SEC as plain text"""
        company = Company(filing.ticker)
        edgar_filing = company.get_filings(
            form=filing.form_type,
            accession_number=filing.accession_number
        )[0]
        text = edgar_filing.text()
        logger.debug(f"Fetched {filing.form_type} {filing.accession_number}: {len(text)} chars")
        return text
