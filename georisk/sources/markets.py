"""
Financial market sources: volatility, rates, commodities, dollar and
safe-haven currencies.

Price series come from yfinance (daily closes); the yield-curve spread comes
from FRED when an API key is configured and currency rates from Frankfurter.
All of these drop out of the cycle on failure rather than publish a guess.
"""

import pandas as pd
import yfinance as yf

from georisk.errors import FetchError, ValidationError
from georisk.scoring import clamp, pct_deviation
from georisk.sources.base import SourceAdapter

VIX_CEILING = 40.0
VIX_HISTORICAL_AVG = 17.5
TREASURY_CEILING = 6.0
TREASURY_BASELINE = 4.0


# ============================================================
# SCORING CURVES
# ============================================================

def score_vix(level):
    return clamp(level / VIX_CEILING * 100)


def score_yield_spread(spread):
    """10Y-2Y spread in percentage points; inversion (<0) pushes the score up."""
    return clamp(50 - spread * 30)


def score_treasury_yield(yield_10y):
    return clamp(yield_10y / TREASURY_CEILING * 100)


def score_oil(price, baseline):
    return clamp(45 + pct_deviation(price, baseline) * 0.6)


def score_gold(price, price_5d_ago, baseline):
    level = (price - baseline) / baseline * 30
    momentum = pct_deviation(price, price_5d_ago) * 3
    return clamp(40 + level + momentum)


def score_dollar(dxy, dxy_5d_ago, baseline):
    level = (dxy - baseline) / baseline * 40
    momentum = pct_deviation(dxy, dxy_5d_ago) * 5
    return clamp(35 + level + momentum)


def safe_haven_flow(usd_chf, usd_jpy, baselines):
    """Mean % strengthening of CHF and JPY against USD relative to baseline.
    Both rates are quoted per USD, so a falling rate is a stronger haven."""
    chf_dev = (baselines.chf - usd_chf) / baselines.chf * 100
    jpy_dev = (baselines.jpy - usd_jpy) / baselines.jpy * 100
    return (chf_dev + jpy_dev) / 2


def score_safe_haven(flow):
    return clamp(45 + flow * 8)


def _signed(v, digits=1):
    return f"{'+' if v > 0 else ''}{v:.{digits}f}"


# ============================================================
# YFINANCE BASE
# ============================================================

class YahooSeriesAdapter(SourceAdapter):
    ticker = None
    period = "5d"

    @property
    def source_url(self):
        return f"https://finance.yahoo.com/quote/{self.ticker}"

    def closes(self):
        try:
            hist = yf.Ticker(self.ticker).history(period=self.period, interval="1d", timeout=self.timeout)
        except Exception as e:
            raise FetchError(f"yfinance request failed for {self.ticker}", self.source_name, original_error=e)
        if not isinstance(hist, pd.DataFrame) or hist.empty or "Close" not in hist.columns:
            raise ValidationError(f"No price history for {self.ticker}", self.source_name)
        closes = pd.to_numeric(hist["Close"], errors="coerce").dropna()
        closes = closes[closes > 0]
        if closes.empty:
            raise ValidationError(f"No valid closes for {self.ticker}", self.source_name)
        return closes

    def latest_and_first(self):
        closes = self.closes()
        return float(closes.iloc[-1]), float(closes.iloc[0])


# ============================================================
# ADAPTERS
# ============================================================

class VixAdapter(YahooSeriesAdapter):
    signal_id = "vix-fear-index"
    name = "Market Volatility Index (VIX)"
    source_name = "Yahoo Finance (VIX)"
    ticker = "^VIX"

    def collect(self):
        vix, _ = self.latest_and_first()
        if vix > 30:   note = "High market anxiety - fear in markets."
        elif vix > 25: note = "Elevated market anxiety."
        elif vix > 20: note = "Slightly elevated volatility."
        else:          note = "Normal market conditions."
        dev = pct_deviation(vix, VIX_HISTORICAL_AVG)
        return self.make_signal(
            score_vix(vix),
            f"VIX at {vix:.1f}. {note}",
            f"{_signed(dev)}% vs historical avg ({VIX_HISTORICAL_AVG})",
        )


class CreditSpreadAdapter(YahooSeriesAdapter):
    """Yield-curve spread from FRED; 10Y yield level from Yahoo without a key."""
    signal_id = "credit-spreads"
    name = "Yield Curve Spread (10Y-2Y)"
    source_name = "FRED (Federal Reserve)"
    ticker = "^TNX"
    FRED_URL = "https://api.stlouisfed.org/fred/series/observations"

    @property
    def source_url(self):
        if self.settings.fred_api_key:
            return "https://fred.stlouisfed.org/"
        return f"https://finance.yahoo.com/quote/{self.ticker}"

    def latest_fred(self, series_id):
        data = self.http_get(self.FRED_URL, params={
            "series_id": series_id, "api_key": self.settings.fred_api_key,
            "file_type": "json", "limit": 1, "sort_order": "desc",
        })
        obs = self.require(data, "observations")
        if not isinstance(obs, list) or not obs:
            raise ValidationError(f"No observations for {series_id}", self.source_name)
        return self.require_number(self.require(obs, 0, "value"), f"{series_id} value")

    def collect(self):
        if not self.settings.fred_api_key:
            return self.collect_treasury_yield()
        y10, y2 = self.latest_fred("DGS10"), self.latest_fred("DGS2")
        spread = y10 - y2
        if spread < 0:       note = "Inverted yield curve - recession warning."
        elif spread < 0.25:  note = "Flat curve - watch for inversion."
        else:                note = "Normal yield curve."
        return self.make_signal(
            score_yield_spread(spread),
            f"10Y-2Y spread at {spread * 100:.0f}bps. {note}",
            f"10Y: {y10:.2f}%, 2Y: {y2:.2f}%",
        )

    def collect_treasury_yield(self):
        y10, _ = self.latest_and_first()
        if y10 > 5:     note = "Very high rates - tight financial conditions."
        elif y10 > 4.5: note = "Elevated rates - monitor for stress."
        else:           note = "Normal rate environment."
        return self.make_signal(
            score_treasury_yield(y10),
            f"10Y Treasury yield at {y10:.2f}%. {note}",
            f"{_signed(pct_deviation(y10, TREASURY_BASELINE))}% vs baseline ({TREASURY_BASELINE}%)",
            confidence="medium",
            source_name="Yahoo Finance (10Y Yield)",
            name="Treasury Yield (10Y)",
        )


class OilPriceAdapter(YahooSeriesAdapter):
    signal_id = "oil-prices"
    name = "WTI Crude Oil Price"
    source_name = "Yahoo Finance (WTI Crude)"
    ticker = "CL=F"

    def collect(self):
        price, _ = self.latest_and_first()
        baseline = self.settings.baselines.oil
        if price > 100:  note = "Extreme prices - major supply disruption."
        elif price > 90: note = "High prices - supply concerns."
        elif price > 80: note = "Elevated prices - monitor geopolitical risk."
        elif price < 50: note = "Very low prices - demand destruction."
        else:            note = "Normal price range."
        return self.make_signal(
            score_oil(price, baseline),
            f"WTI crude at ${price:.2f}/barrel. {note}",
            f"{_signed(pct_deviation(price, baseline))}% vs baseline (${baseline:g}/bbl)",
        )


class GoldPriceAdapter(YahooSeriesAdapter):
    signal_id = "gold-safe-haven"
    name = "Gold Price (Safe Haven)"
    source_name = "Yahoo Finance (Gold)"
    ticker = "GC=F"

    def collect(self):
        price, first = self.latest_and_first()
        baseline = self.settings.baselines.gold
        change = pct_deviation(price, first)
        if change > 3:    note = "Strong safe haven buying - elevated fear."
        elif change > 1:  note = "Rising gold demand - some caution."
        elif change < -2: note = "Gold selling - risk appetite returning."
        else:             note = "Stable gold market."
        return self.make_signal(
            score_gold(price, first, baseline),
            f"Gold at ${price:.0f}/oz ({_signed(change)}% 5d). {note}",
            f"{_signed(pct_deviation(price, baseline))}% vs ${baseline:g} baseline",
        )


class DollarIndexAdapter(YahooSeriesAdapter):
    signal_id = "dollar-index"
    name = "US Dollar Index (DXY)"
    source_name = "Yahoo Finance (DXY)"
    ticker = "DX-Y.NYB"

    def collect(self):
        dxy, first = self.latest_and_first()
        baseline = self.settings.baselines.dxy
        change = pct_deviation(dxy, first)
        if dxy > 108 and change > 1: note = "Strong dollar surge - global flight to safety."
        elif dxy > 105:              note = "Elevated dollar - emerging market stress."
        elif dxy < 95:               note = "Weak dollar - risk-on environment."
        else:                        note = "Normal dollar trading."
        return self.make_signal(
            score_dollar(dxy, first, baseline),
            f"DXY at {dxy:.1f} ({_signed(change, 2)}% 5d). {note}",
            f"{_signed(pct_deviation(dxy, baseline))}% vs baseline ({baseline:g})",
        )


class SafeHavenAdapter(SourceAdapter):
    signal_id = "safe-haven-flows"
    name = "Safe-Haven Currency Flows"
    source_name = "Frankfurter API"
    source_url = "https://www.frankfurter.app/"
    URL = "https://api.frankfurter.app/latest"

    def collect(self):
        data = self.http_get(self.URL, params={"from": "USD", "to": "CHF,JPY"})
        rates = self.require(data, "rates")
        chf = self.require_number(self.require(rates, "CHF"), "CHF rate")
        jpy = self.require_number(self.require(rates, "JPY"), "JPY rate")
        if chf <= 0 or jpy <= 0:
            raise ValidationError("Non-positive exchange rate", self.source_name)
        flow = safe_haven_flow(chf, jpy, self.settings.baselines)
        score = score_safe_haven(flow)
        return self.make_signal(
            score,
            f"USD/CHF at {chf:.3f}, USD/JPY at {jpy:.1f}. "
            f"{'Elevated' if score > 55 else 'Normal'} safe-haven flows.",
            f"{_signed(flow)}% vs baseline",
        )

