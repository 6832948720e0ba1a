import argparse
import logging
import sys
from colorama import init, Fore

from .config import Config
from .errors import PreprocessorError
from .preprocessor import Preprocessor

def build_parser():
    parser = argparse.ArgumentParser(prog="pre-wgsl", description="pre-wgsl - WGSL shader preprocessor")
    parser.add_argument("input", help="Path to the shader file to preprocess")
    parser.add_argument("-I", "--include-path", help="Directory that #include names are resolved against")
    parser.add_argument("-D", dest="macros", action="append", default=[], metavar="MACRO[=VALUE]",
                        help="Define a macro (e.g. -D FOO or -D BAR=1), may be repeated")
    parser.add_argument("--define", help="Comma-separated macro definitions (e.g. 'WORKGROUP_SIZE=64,USE_F16')")
    parser.add_argument("--config", help="Path to a JSON file with 'include_path' and 'defines'")
    parser.add_argument("-o", "--output", help="Write output to this file instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log preprocessing steps to stderr")
    return parser

def main(argv=None):
    init(autoreset=True)
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        # 1. Configuration: config file first, command line on top
        config = Config()
        if args.config:
            config.load_config(args.config)
        if args.include_path is not None:
            config.include_path = args.include_path or "."
        for text in args.macros:
            config.add_define(text)
        config.parse_defines(args.define)

        # 2. Processing
        result = Preprocessor(config).preprocess_file(args.input)
    except PreprocessorError as e:
        print(Fore.RED + f"pre-wgsl error: {e}", file=sys.stderr)
        return 1

    # 3. Output
    if args.output:
        try:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(result)
        except OSError as e:
            print(Fore.RED + f"pre-wgsl error: could not write {args.output}: {e.strerror or e}", file=sys.stderr)
            return 1
        if args.verbose:
            print(Fore.CYAN + f"Output saved to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(result)

    return 0

if __name__ == "__main__":
    sys.exit(main())
