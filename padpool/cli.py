import argparse
import logging
from pathlib import Path
from typing import List

import uvicorn

from padpool.config import ServerConfig, load_config
from padpool.errors import PadPoolError
from padpool.load_env import config_path, data_dir, host, log_level, port
from padpool.main import create_app
from padpool.pool_store import PoolStore
from padpool.scheduler import PoolScheduler
from padpool.services.pool_service import PoolService


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="padpool",
        description="Keyed reconstruction of files against a disposable random byte pool",
    )
    parser.add_argument("--config", type=str, default=config_path, help="Path to config.json")
    parser.add_argument("--data-dir", type=str, default=data_dir, help="Directory holding the pool files")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP server")
    serve.add_argument("--host", type=str, default=host, help="Bind address")
    serve.add_argument("--port", type=int, default=port, help="Bind port")

    subparsers.add_parser("rotate", help="Run one retention and creation pass")

    encode = subparsers.add_parser("encode", help="Generate a key file for FILE")
    encode.add_argument("file", type=str, help="File to encode")
    encode.add_argument("--output", type=str, default=".", help="Directory for the key file")

    decode = subparsers.add_parser("decode", help="Reconstruct the file described by KEY")
    decode.add_argument("key", type=str, help="Key file (.json)")
    decode.add_argument("--output", type=str, default=".", help="Directory for the reconstructed file")
    return parser


def serve(config: ServerConfig) -> int:
    app = create_app(config)
    uvicorn.run(app, host=config.host, port=config.port)
    return 0


def rotate(config: ServerConfig) -> int:
    store = PoolStore(config.data_dir, pool_size=config.pool_size)
    PoolScheduler(config, store).run_once()
    return 0


def encode_file(service: PoolService, file: Path, output: Path) -> int:
    key = service.encode_file(file.name, file.read_bytes())
    key_path = output / service.converter.key_file_name(file.name)
    key_path.write_text(service.converter.key_to_json(key), encoding="utf-8")
    print(f"Key file ({key_path}) generated successfully. It is {service.validity(key.date)}.")
    return 0


def decode_key(service: PoolService, key_file: Path, output: Path) -> int:
    key = service.converter.json_to_key(key_file.read_bytes())
    file_name, data = service.decode_key(key)
    target = output / file_name
    target.write_bytes(data)
    print(f"File ({target}) reconstructed successfully.")
    return 0


def main(argv: List[str] | None = None) -> int:
    logging.basicConfig(level=log_level)
    args = get_parser().parse_args(argv)
    config = load_config(args.config, args.data_dir, host=host, port=port)

    if args.command == "serve":
        config = config.model_copy(update={"host": args.host, "port": args.port})
        return serve(config)
    if args.command == "rotate":
        return rotate(config)

    service = PoolService(config, PoolStore(config.data_dir, pool_size=config.pool_size))
    try:
        if args.command == "encode":
            return encode_file(service, Path(args.file), Path(args.output))
        return decode_key(service, Path(args.key), Path(args.output))
    except (PadPoolError, OSError) as e:
        logging.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
