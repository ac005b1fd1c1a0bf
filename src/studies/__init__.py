"""
Technical studies.

Key Components:
- Study: lifecycle contract and batch-render cache
- InstantStudy / WindowedStudy: per-candle and trailing-window strategies
- CandleStudy, VolumeStudy, LastPriceLineStudy: per-candle studies
- SMAStudy, EMAStudy, RSIStudy, BollingerBandsStudy: windowed indicators
"""

from .base import ComputedDataPoint, Study
from .instant_study import InstantStudy
from .windowed_study import WindowedStudy
from .candle_study import CandleData, CandleStudy
from .volume_study import VolumeData, VolumeStudy
from .last_price_line_study import LastPriceLineStudy
from .sma_study import SMAStudy
from .ema_study import EMAStudy
from .rsi_study import RSIStudy, rsi_from_closes
from .bollinger_bands_study import BollingerBandsStudy, BollingerBandsValue

__all__ = [
    "ComputedDataPoint",
    "Study",
    "InstantStudy",
    "WindowedStudy",
    "CandleData",
    "CandleStudy",
    "VolumeData",
    "VolumeStudy",
    "LastPriceLineStudy",
    "SMAStudy",
    "EMAStudy",
    "RSIStudy",
    "rsi_from_closes",
    "BollingerBandsStudy",
    "BollingerBandsValue",
]
