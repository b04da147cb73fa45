"""
CLI Storage Commands

Commands that talk to the configured storage backend:
- anchor: run one stage through the pipeline and print the receipt
- fetch:  print the JSON stored under a content address
- serve:  run the HTTP API with uvicorn
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.schemas.errors import AnchorException
from core.storage import build_storage_gateway
from orchestrator.content import ContentService
from orchestrator.pipeline import create_pipeline


logger = logging.getLogger(__name__)


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def anchor_cmd(args: Namespace) -> int:
    try:
        payload = json.loads(Path(args.payload).read_text())
    except (OSError, ValueError) as e:
        print(f"Error: cannot load payload: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    config = args.runtime_config
    gateway = build_storage_gateway(config)
    try:
        receipt = create_pipeline(config, gateway).run(args.stage, payload)
    except AnchorException as e:
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        if e.details:
            print(json.dumps(e.details, indent=2, default=str), file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    finally:
        gateway.close()

    print(receipt.model_dump_json(indent=2))
    return EXIT_SUCCESS


def fetch_cmd(args: Namespace) -> int:
    gateway = build_storage_gateway(args.runtime_config)
    try:
        record = ContentService(gateway).fetch(args.cid)
    except AnchorException as e:
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    finally:
        gateway.close()

    print(json.dumps(record.data, indent=2, ensure_ascii=False))
    return EXIT_SUCCESS


def serve_cmd(args: Namespace) -> int:
    import uvicorn

    from api.app import create_app

    config = args.runtime_config
    host = args.host or config.server.host
    port = args.port or config.server.port

    logger.info(f"Serving on {host}:{port}")
    uvicorn.run(create_app(config), host=host, port=port)
    return EXIT_SUCCESS
