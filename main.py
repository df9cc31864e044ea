import argparse

from churn_analysis.pipeline import PipelineRunner


def main() -> None:
    """Run the full telco churn model comparison."""
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument("--config", default="config/default.yaml", help="Path to the YAML config")
    args = parser.parse_args()

    runner = PipelineRunner(args.config)
    runner.run()


if __name__ == "__main__":
    main()
