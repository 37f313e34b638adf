# burncore/formula.py

from dataclasses import dataclass

BASE_BURN_BPS = 5
BPS_DENOMINATOR = 10_000

# one factor of 100 per multiplier
MULTIPLIER_SCALE = 100
FINAL_DENOMINATOR = MULTIPLIER_SCALE ** 3


class TierTable:
    """
    Ordered range-to-value lookup.

    Each tier is `(predicate, value)`; the first matching predicate wins and
    `default` applies when none match.
    """

    def __init__(self, name: str, tiers, default: int):
        self.name = name
        self.tiers = tuple(tiers)
        self.default = default

    def lookup(self, x: int) -> int:
        for predicate, value in self.tiers:
            if predicate(x):
                return value
        return self.default


# 40 < v <= 75 is "moderate"
VOLATILITY_TIERS = TierTable(
    "volatility",
    [
        (lambda v: v > 75, 200),
        (lambda v: v > 40, 150),
    ],
    default=100,
)

# 40 <= s <= 60 is neutral
SENTIMENT_TIERS = TierTable(
    "sentiment",
    [
        (lambda s: s < 40, 120),
        (lambda s: s > 60, 90),
    ],
    default=100,
)

LIQUIDITY_TIERS = TierTable(
    "liquidity",
    [
        (lambda d: d < 200, 50),
    ],
    default=100,
)


@dataclass(frozen=True)
class BurnBreakdown:
    volatility: int
    sentiment: int
    volume_24h: int
    liquidity_depth: int
    base: int
    volatility_multiplier: int
    sentiment_factor: int
    liquidity_dampener: int
    amount: int

    def to_dict(self):
        return {
            "volatility": self.volatility,
            "sentiment": self.sentiment,
            "volume_24h": self.volume_24h,
            "liquidity_depth": self.liquidity_depth,
            "base": self.base,
            "volatility_multiplier": self.volatility_multiplier,
            "sentiment_factor": self.sentiment_factor,
            "liquidity_dampener": self.liquidity_dampener,
            "amount": self.amount,
        }


class BurnFormula:
    def __init__(
        self,
        volatility_tiers: TierTable = VOLATILITY_TIERS,
        sentiment_tiers: TierTable = SENTIMENT_TIERS,
        liquidity_tiers: TierTable = LIQUIDITY_TIERS,
    ):
        self.volatility_tiers = volatility_tiers
        self.sentiment_tiers = sentiment_tiers
        self.liquidity_tiers = liquidity_tiers

    @staticmethod
    def base_burn(volume_24h: int) -> int:
        return volume_24h * BASE_BURN_BPS // BPS_DENOMINATOR

    def breakdown(self, volatility: int, sentiment: int, volume_24h: int, liquidity_depth: int) -> BurnBreakdown:
        """
        Integer fixed-point computation, every division floors.
        Python ints never overflow, so no clamp on volume_24h is needed.
        """
        base = self.base_burn(volume_24h)

        vm = self.volatility_tiers.lookup(volatility)
        sf = self.sentiment_tiers.lookup(sentiment)
        ld = self.liquidity_tiers.lookup(liquidity_depth)

        amount = base * vm * sf * ld // FINAL_DENOMINATOR

        return BurnBreakdown(
            volatility=volatility,
            sentiment=sentiment,
            volume_24h=volume_24h,
            liquidity_depth=liquidity_depth,
            base=base,
            volatility_multiplier=vm,
            sentiment_factor=sf,
            liquidity_dampener=ld,
            amount=amount,
        )

    def compute(self, volatility: int, sentiment: int, volume_24h: int, liquidity_depth: int) -> int:
        return self.breakdown(volatility, sentiment, volume_24h, liquidity_depth).amount
