# Entry point for the mserv dashboard server
import sys

from dashboard_lib.main import create_app, Config
from dashboard_lib.setup import parse_args, setup


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    rc = setup(argv)
    if rc >= 0:
        return rc
    args = parse_args(argv)
    app = create_app(Config(config_path=args.config))

    import uvicorn
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
