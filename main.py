#!/usr/bin/env python3
"""
Meme-Coin Metrics Engine - Command line entry point
Prints engine results as JSON for the listing, news, metrics and predictions views
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import orjson
from dotenv import find_dotenv, load_dotenv

from config.config_manager import ConfigManager
from config.settings import Settings
from core.engine import MemeCoinEngine
from monitoring.logger import setup_logging
from utils.constants import SUPPORTED_HORIZONS, Horizon, RiskLevel
from utils.errors import EngineError

logger = logging.getLogger("memecoin_engine")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Meme-Coin Metrics Engine - social signals, scores and recommendations"
    )
    parser.add_argument('--version', action='version',
                        version=f"{Settings.APP_NAME} {Settings.APP_VERSION}")
    parser.add_argument(
        '--config',
        default=None,
        help='Path to a YAML configuration file (default: ENGINE_CONFIG_FILE or config/engine.yaml)'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    list_parser = subparsers.add_parser('list', help='One page of scored meme-coins')
    list_parser.add_argument('--page', type=int, default=1)
    list_parser.add_argument('--per-page', type=int, default=None)

    news_parser = subparsers.add_parser('news', help='Influencer news ranked by engagement')
    news_parser.add_argument('coin_id')

    metrics_parser = subparsers.add_parser('metrics', help='Synthesized social metric series')
    metrics_parser.add_argument('coin_id')
    metrics_parser.add_argument(
        '--horizon',
        choices=[h.value for h in SUPPORTED_HORIZONS],
        default=Horizon.D7.value
    )

    predictions_parser = subparsers.add_parser('predictions', help='Top projected movers')
    predictions_parser.add_argument(
        '--horizon',
        choices=[Horizon.D7.value, Horizon.D30.value, Horizon.D90.value],
        default=Horizon.D7.value
    )
    predictions_parser.add_argument('--risk', choices=[r.value for r in RiskLevel], default=None)
    predictions_parser.add_argument('--limit', type=int, default=6)

    return parser


async def run(args: argparse.Namespace) -> dict:
    """Execute one command against a fresh engine"""
    config_path = args.config or Settings.default_config_file()
    config = ConfigManager(config_path).load()
    if Settings.debug():
        config.logging = config.logging.model_copy(update={"log_level": "DEBUG"})
    setup_logging(config.logging)

    async with MemeCoinEngine(config) as engine:
        if args.command == 'list':
            coins, has_more = await engine.list_page(args.page, args.per_page)
            return {"coins": [coin.to_dict() for coin in coins], "has_more": has_more}

        if args.command == 'news':
            news = await engine.ranked_news(args.coin_id)
            return {"news": [item.to_dict() for item in news]}

        if args.command == 'metrics':
            series = await engine.social_metrics(args.coin_id, args.horizon)
            return {"coin_id": args.coin_id, "horizon": args.horizon,
                    "series": [point.to_dict() for point in series]}

        ranked = await engine.top_predictions(args.horizon, args.risk, args.limit)
        return {
            "predictions": [
                {"coin": coin.to_dict(), "prediction": prediction.to_dict()}
                for coin, prediction in ranked
            ]
        }


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    # Load environment variables from the working directory's .env
    load_dotenv(find_dotenv(usecwd=True))

    args = build_parser().parse_args(argv)

    try:
        result = asyncio.run(run(args))
    except KeyboardInterrupt:
        return 130
    except EngineError as e:
        logger.error(f"Engine error: {e}")
        return 1

    sys.stdout.write(orjson.dumps(result, option=orjson.OPT_INDENT_2).decode() + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
