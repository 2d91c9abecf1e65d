from __future__ import annotations

import argparse
import sys
from pathlib import Path

from combine_models.data.schemas import Dataset
from combine_models.distill.combined import CombinedModel
from combine_models.distill.config import DistillationSettings
from combine_models.distill.orchestrator import DistillationOrchestrator
from combine_models.errors import CombineModelsError, InvalidConfiguration
from combine_models.utils.config import Config
from combine_models.utils.io import load_table, save_table
from combine_models.utils.logging import (
    finalize_run_metadata,
    get_logger,
    save_run_metadata,
    set_debug,
    start_run_metadata,
)

logger = get_logger(__name__)


def _load_settings(args: argparse.Namespace) -> DistillationSettings:
    if args.config:
        settings = Config.from_yaml(args.config).distillation()
    else:
        settings = DistillationSettings()
    # Flags given on the command line win over the config file
    return settings.merged(
        resample_percent=args.resample_percent,
        seed=args.seed,
        meta=args.meta,
        surrogate=args.surrogate,
        class_column=args.class_column,
        debug=True if args.debug else None,
    )


def cmd_build(args: argparse.Namespace) -> int:
    settings = _load_settings(args)
    set_debug(settings.debug)
    if not settings.class_column:
        raise InvalidConfiguration("No class column given (--class-column or config)")

    df = load_table(args.data)
    dataset = Dataset.from_frame(df, settings.class_column)
    logger.info(
        "Loaded %d instances, %d attributes from %s",
        len(dataset),
        dataset.num_attributes,
        args.data,
    )

    metadata = start_run_metadata(
        stage="build",
        config=settings.model_dump(),
        seed=settings.seed,
        data_fingerprint=dataset.fingerprint(),
    )
    model = DistillationOrchestrator().build(dataset, settings.to_config())
    output = model.save(args.output)

    metadata_path = Path(f"{output}.run.json")
    finalize_run_metadata(
        metadata,
        outputs=[output],
        metrics={"n_source": model.n_source, "n_synthetic": model.n_synthetic},
    )
    save_run_metadata(metadata, metadata_path)
    print(model.describe())
    return 0


def cmd_predict(args: argparse.Namespace) -> int:
    model = CombinedModel.load(args.model)
    df = load_table(args.data)
    predictions = model.predict_frame(df)
    if args.output:
        save_table(predictions.to_frame(), args.output)
        logger.info("Wrote %d predictions to %s", len(predictions), args.output)
    else:
        for value in predictions:
            print(value)
    return 0


def cmd_describe(args: argparse.Namespace) -> int:
    print(CombinedModel.load(args.model).describe())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="combine-models",
        description="Combine the models of a meta classifier into a single surrogate model.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="train a combined model")
    build.add_argument("--config", type=str, default=None)
    build.add_argument("--data", type=str, required=True, help="CSV or Parquet training table")
    build.add_argument("--output", type=str, required=True, help="model file to write")
    build.add_argument("--class-column", type=str, default=None)
    build.add_argument(
        "--resample-percent",
        type=float,
        default=None,
        help="size of the generated training set, %% of the training set (default 100)",
    )
    build.add_argument("--seed", type=int, default=None, help="random number seed (default 1)")
    build.add_argument("--meta", type=str, default=None, help="meta classifier (default bagging)")
    build.add_argument(
        "--surrogate", type=str, default=None, help="base classifier (default decision_tree)"
    )
    build.add_argument("--debug", action="store_true")
    build.set_defaults(func=cmd_build)

    predict = subparsers.add_parser("predict", help="predict with a combined model")
    predict.add_argument("--model", type=str, required=True)
    predict.add_argument("--data", type=str, required=True)
    predict.add_argument("--output", type=str, default=None)
    predict.set_defaults(func=cmd_predict)

    describe = subparsers.add_parser("describe", help="print a combined model summary")
    describe.add_argument("--model", type=str, required=True)
    describe.set_defaults(func=cmd_describe)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except CombineModelsError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
