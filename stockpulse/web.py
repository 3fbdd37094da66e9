"""
FastAPI JSON interface for the stock and heatmap views.

A presentation layer polls these endpoints; all rendering happens on the
client. Each request runs its own fetch cycle, so no state is shared
between requests.
"""

import logging
from typing import Dict, List, Optional
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from stockpulse.analytics.colors import legend_gradient
from stockpulse.analytics.fetch_cycle import build_heatmap, fetch_all
from stockpulse.analytics.statistics import compute_statistics
from stockpulse.config import Settings, get_settings
from stockpulse.data_sources.mock_prices import MockPriceSource
from stockpulse.errors import UnknownTickerError


class StockInfo(BaseModel):
    name: str
    symbol: str


class SampleOut(BaseModel):
    price: float
    timestamp: str


class StatisticsOut(BaseModel):
    mean: float
    std_dev: float


class StockResponse(BaseModel):
    symbol: str
    name: str
    minutes: int
    samples: List[SampleOut]
    statistics: StatisticsOut


class HeatmapResponse(BaseModel):
    symbols: List[str]
    names: List[str]
    minutes: int
    statistics: Dict[str, StatisticsOut]
    matrix: Optional[List[List[float]]]
    colors: Optional[List[List[str]]]
    label_colors: Optional[List[List[str]]]
    legend: List[str]
    warning: Optional[str]


def create_app(
    settings: Optional[Settings] = None,
    source: Optional[MockPriceSource] = None
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Registry and window settings (defaults to get_settings())
        source: Price source (defaults to a MockPriceSource on settings)

    Returns:
        FastAPI app
    """
    settings = settings if settings is not None else get_settings()
    source = source if source is not None else MockPriceSource(settings)

    app = FastAPI(title="Stock Pulse")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    def check_window(minutes: int) -> int:
        if not settings.min_minutes <= minutes <= settings.max_minutes:
            raise HTTPException(
                status_code=422,
                detail=(
                    f"minutes must be between {settings.min_minutes} "
                    f"and {settings.max_minutes}"
                ),
            )
        return minutes

    @app.get("/api/stocks", response_model=List[StockInfo])
    async def list_stocks():
        """Registry entries in display order."""
        return [StockInfo(name=t.name, symbol=t.symbol) for t in settings.tickers]

    @app.get("/api/stocks/{symbol}", response_model=StockResponse)
    async def get_stock(symbol: str, minutes: int = Query(settings.default_minutes)):
        """Samples (newest first) and statistics for one ticker."""
        check_window(minutes)
        try:
            ticker = settings.ticker(symbol)
            if ticker is None:
                raise UnknownTickerError(symbol)
            series = await source.fetch(symbol, minutes)
        except UnknownTickerError as e:
            raise HTTPException(status_code=404, detail=str(e))

        stats = compute_statistics(series.prices)
        return StockResponse(
            symbol=symbol,
            name=ticker.name,
            minutes=minutes,
            samples=[
                SampleOut(price=s.price, timestamp=s.timestamp.isoformat())
                for s in series
            ],
            statistics=StatisticsOut(mean=stats.mean, std_dev=stats.std_dev),
        )

    @app.get("/api/heatmap", response_model=HeatmapResponse)
    async def get_heatmap(minutes: int = Query(settings.default_minutes)):
        """Correlation matrix across the whole registry."""
        check_window(minutes)
        result = await fetch_all(source, settings.symbols, minutes)
        snapshot = build_heatmap(result)

        return HeatmapResponse(
            symbols=snapshot.symbols,
            names=[t.name for t in settings.tickers],
            minutes=snapshot.minutes,
            statistics={
                symbol: StatisticsOut(mean=s.mean, std_dev=s.std_dev)
                for symbol, s in snapshot.statistics.items()
            },
            matrix=snapshot.matrix.values if snapshot.matrix is not None else None,
            colors=snapshot.colors,
            label_colors=snapshot.label_colors,
            legend=list(legend_gradient()),
            warning=snapshot.warning,
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="127.0.0.1", port=8000)
