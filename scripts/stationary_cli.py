import argparse
from mitocount.pipeline import run_pipeline
from mitocount.confirmation import ConsoleConfirmation, DefaultConfirmation, ScriptedConfirmation
from mitocount import config

def parse_args():
    p = argparse.ArgumentParser(description="Count stationary mitochondria from a CellProfiler export.")
    p.add_argument("csv", help="CSV with image number and x-centre columns")
    p.add_argument("--out-dir", default=config.DEFAULT_OUT_DIR, help="Output directory")
    p.add_argument("--kymo-size", type=int, default=config.KYMO_SIZE, help="Images per time interval")
    p.add_argument("--drug-add", type=int, default=config.DRUG_ADD, help="Image of drug addition (1 = none)")
    p.add_argument("--image-num-col", default=config.IMAGE_NUM_COL, help="Image number column (1-based or name)")
    p.add_argument("--center-x-col", default=config.CENTER_X_COL, help="X-centre column (1-based or name)")
    p.add_argument("--high-threshold", type=float, default=config.HIGH_THRESHOLD)
    p.add_argument("--low-threshold", type=float, default=config.LOW_THRESHOLD)
    p.add_argument("--multiplicity-threshold", type=float, default=config.MULTIPLICITY_THRESHOLD)
    p.add_argument("--gap-threshold", type=int, default=config.GAP_THRESHOLD)
    p.add_argument("--redo-interval", type=int, help="Re-run a single time interval (1 = baseline)")
    p.add_argument("--responses", help="Comma separated answers instead of prompting (y/n/blank)")
    p.add_argument("--no-prompt", action="store_true", help="Accept default decisions without asking")
    p.add_argument("--no-plot", action="store_true", help="Skip kymograph PNGs")
    p.add_argument("--verbose", action="store_true", help="Print every decision")
    return p.parse_args()

def main():
    args = parse_args()

    config.KYMO_SIZE              = args.kymo_size
    config.DRUG_ADD               = args.drug_add
    config.IMAGE_NUM_COL          = args.image_num_col
    config.CENTER_X_COL           = args.center_x_col
    config.HIGH_THRESHOLD         = args.high_threshold
    config.LOW_THRESHOLD          = args.low_threshold
    config.MULTIPLICITY_THRESHOLD = args.multiplicity_threshold
    config.GAP_THRESHOLD          = args.gap_threshold
    config.PRINT_DECISIONS        = args.verbose
    config.check_settings()

    if args.responses is not None:
        provider = ScriptedConfirmation(args.responses.split(","))
    elif args.no_prompt:
        provider = DefaultConfirmation()
    else:
        provider = ConsoleConfirmation()
        print(f"---Each time interval is {config.KYMO_SIZE} images ('kymo_size').")
        print(f"---Drug addition is specified at image #{config.DRUG_ADD} ('drug_add').")
        if config.DRUG_ADD == 1:
            print("This implies no drug addition")
        print(f"---Columns {config.IMAGE_NUM_COL} and {config.CENTER_X_COL} will be read from imported file.")
        input("Press Enter if these values are ok. Otherwise quit (Ctrl+C) and edit the options.")

    run_pipeline(args.csv, args.out_dir, provider=provider,
                 redo_interval=args.redo_interval, plot=not args.no_plot)

if __name__ == "__main__":
    main()
