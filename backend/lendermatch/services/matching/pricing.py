"""Pricing tier lookup over a program's LTV band x DSCR band matrix."""

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Sequence

from lendermatch.core.exceptions import MalformedPricingBand
from lendermatch.models.domain.lender import PricingMatrixRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Band:
    """
    Half-open numeric range [lower, upper).

    Attributes:
        lower: Inclusive lower bound
        upper: Exclusive upper bound, None when unbounded above
    """

    lower: Decimal
    upper: Optional[Decimal] = None

    def contains(self, value: Decimal) -> bool:
        if value < self.lower:
            return False
        return self.upper is None or value < self.upper


def parse_band(band: str) -> Band:
    """
    Parse a band string such as "65-70", "1.25-1.35" or "1.35+".

    Args:
        band: String-encoded range

    Returns:
        Parsed Band

    Raises:
        MalformedPricingBand: If the string is not a valid range
    """
    if not isinstance(band, str) or not band.strip():
        raise MalformedPricingBand(band)

    text = band.strip()
    try:
        if text.endswith("+"):
            lower = Decimal(text[:-1].strip())
            upper = None
        else:
            lower_text, sep, upper_text = text.partition("-")
            if not sep:
                raise MalformedPricingBand(band)
            lower = Decimal(lower_text.strip())
            upper = Decimal(upper_text.strip())
    except InvalidOperation:
        raise MalformedPricingBand(band) from None

    if not lower.is_finite():
        raise MalformedPricingBand(band)
    if upper is not None and (not upper.is_finite() or lower >= upper):
        raise MalformedPricingBand(band)
    return Band(lower=lower, upper=upper)


@dataclass
class PricingTier:
    """
    Selected pricing cell for a qualifying program.

    Attributes:
        matrix_id: Source pricing matrix row
        spread_bps: Rate spread in basis points
        ltv_band: LTV band string as authored
        dscr_band: DSCR band string as authored
    """

    matrix_id: uuid.UUID
    spread_bps: int
    ltv_band: str
    dscr_band: str


class PricingTierResolver:
    """Selects the pricing row whose LTV and DSCR bands both contain the scenario values."""

    def resolve(
        self,
        rows: Sequence[PricingMatrixRow],
        ltv: Optional[Decimal],
        dscr: Optional[Decimal],
    ) -> Optional[PricingTier]:
        """
        Find the pricing tier for a scenario.

        Rows with unparseable bands are skipped. Overlapping bands are an
        authoring error: the row with the lowest (LTV lower, DSCR lower) wins.

        Args:
            rows: Pricing matrix rows of one program version
            ltv: Scenario LTV percentage
            dscr: Scenario DSCR

        Returns:
            The matching PricingTier, or None when nothing matches or a value is missing
        """
        if ltv is None or dscr is None or not rows:
            return None

        candidates: List[tuple[Band, Band, PricingMatrixRow]] = []
        for row in rows:
            try:
                ltv_band = parse_band(row.ltv_band)
                dscr_band = parse_band(row.dscr_band)
            except MalformedPricingBand as e:
                logger.warning(f"Skipping pricing row {row.matrix_id} for program {row.program_id}: {e}")
                continue

            if ltv_band.contains(ltv) and dscr_band.contains(dscr):
                candidates.append((ltv_band, dscr_band, row))

        if not candidates:
            return None

        candidates.sort(key=lambda c: (c[0].lower, c[1].lower))
        if len(candidates) > 1:
            logger.warning(
                f"Overlapping pricing bands for program {candidates[0][2].program_id}: "
                f"{len(candidates)} rows match LTV {ltv} / DSCR {dscr}, using the first"
            )

        row = candidates[0][2]
        return PricingTier(
            matrix_id=row.matrix_id,
            spread_bps=row.spread_bps,
            ltv_band=row.ltv_band,
            dscr_band=row.dscr_band,
        )
