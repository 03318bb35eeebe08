from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from typing import Any

from pwclock_gui.core.audit import AUDIT_LOGGER, setup_file_logger
from pwclock_gui.core.config import Config, ConfigError, load_config
from pwclock_gui.core.service import ClockService
from pwclock_gui.platform.detect import dump_detect


def _setup_cli_logging() -> logging.Logger:
    logger = setup_file_logger("pwclock.cli", "cli")
    setup_file_logger(AUDIT_LOGGER, "audit")
    logger.info("start pid=%s argv=%s", os.getpid(), " ".join(sys.argv))
    return logger


def _emit(payload: dict[str, Any]) -> None:
    print(json.dumps({"schema": 1, **payload}, indent=2, sort_keys=True))


def _service(args: argparse.Namespace) -> ClockService:
    return ClockService(config=args.config_obj, logger=logging.getLogger("pwclock.cli"))


def cmd_detect(args: argparse.Namespace) -> int:
    print(json.dumps(dump_detect(args.config_obj), indent=2, sort_keys=True))
    return 0


def cmd_get(args: argparse.Namespace) -> int:
    # Construction already queried pw-metadata.
    settings = _service(args).current
    _emit({"success": True, **settings.to_json()})
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    svc = _service(args)
    settings = svc.current
    _emit({"success": True, "pipewire_active": svc.is_service_running(), **settings.to_json()})
    return 0


def _check_policy(value: int, allowed: tuple[int, ...], what: str) -> str | None:
    if value in allowed:
        return None
    return f"{what} {value} is not one of {', '.join(str(v) for v in allowed)}"


def cmd_set_rate(args: argparse.Namespace) -> int:
    cfg: Config = args.config_obj
    if args.strict:
        err = _check_policy(args.rate, cfg.sample_rates, "sample rate")
        if err:
            _emit({"success": False, "error": err})
            return 2
    svc = _service(args)
    success = svc.set_sample_rate(args.rate)
    payload: dict[str, Any] = {"success": success, **svc.current.to_json()}
    if not success:
        payload["error"] = f"failed to set sample rate to {args.rate}"
    _emit(payload)
    return 0 if success else 1


def cmd_set_quantum(args: argparse.Namespace) -> int:
    cfg: Config = args.config_obj
    if args.strict:
        err = _check_policy(args.size, cfg.buffer_sizes, "buffer size")
        if err:
            _emit({"success": False, "error": err})
            return 2
    svc = _service(args)
    success = svc.set_buffer_size(args.size)
    payload: dict[str, Any] = {"success": success, **svc.current.to_json()}
    if not success:
        payload["error"] = f"failed to set buffer size to {args.size}"
    _emit(payload)
    return 0 if success else 1


def cmd_reset_rate(args: argparse.Namespace) -> int:
    svc = _service(args)
    success = svc.reset_sample_rate()
    _emit({"success": success, **svc.current.to_json()})
    return 0 if success else 1


def cmd_reset_quantum(args: argparse.Namespace) -> int:
    svc = _service(args)
    success = svc.reset_buffer_size()
    _emit({"success": success, **svc.current.to_json()})
    return 0 if success else 1


def cmd_restart(args: argparse.Namespace) -> int:
    svc = _service(args)
    success = svc.restart_service()
    payload: dict[str, Any] = {"success": success, "units": list(args.config_obj.restart_units)}
    if success and args.wait is not None:
        time.sleep(args.wait / 1000.0)
        payload["settings"] = svc.query_current_settings().to_json()
    _emit(payload)
    return 0 if success else 1


def _non_negative(raw: str) -> int:
    v = int(raw)
    if v < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return v


def main(argv: list[str] | None = None) -> int:
    logger = _setup_cli_logging()
    p = argparse.ArgumentParser(prog="pwclock")
    p.add_argument("--config", default=None, help="Path to config.json")

    sub = p.add_subparsers(dest="cmd", required=True)

    sd = sub.add_parser("detect", help="Show tool availability and unit states")
    sd.set_defaults(func=cmd_detect)

    sg = sub.add_parser("get", help="Print the forced sample rate and buffer size")
    sg.set_defaults(func=cmd_get)

    sst = sub.add_parser("status", help="Current settings plus whether PipeWire is active")
    sst.set_defaults(func=cmd_status)

    sr = sub.add_parser("set-rate", help="Force the clock sample rate (Hz)")
    sr.add_argument("rate", type=int)
    sr.add_argument("--strict", action="store_true", help="Only accept the configured rates")
    sr.set_defaults(func=cmd_set_rate)

    sq = sub.add_parser("set-quantum", help="Force the clock quantum (frames)")
    sq.add_argument("size", type=int)
    sq.add_argument("--strict", action="store_true", help="Only accept the configured sizes")
    sq.set_defaults(func=cmd_set_quantum)

    srr = sub.add_parser("reset-rate", help="Stop forcing the sample rate")
    srr.set_defaults(func=cmd_reset_rate)

    srq = sub.add_parser("reset-quantum", help="Stop forcing the quantum")
    srq.set_defaults(func=cmd_reset_quantum)

    srs = sub.add_parser("restart", help="Restart wireplumber, pipewire and pipewire-pulse")
    srs.add_argument("--wait", type=_non_negative, default=None, metavar="MS",
                     help="Re-query settings MS milliseconds after a successful restart")
    srs.set_defaults(func=cmd_restart)

    args = p.parse_args(argv)
    try:
        args.config_obj = load_config(args.config)
    except ConfigError as e:
        logger.error("config error=%s", e)
        print(f"pwclock: {e}", file=sys.stderr)
        return 2

    try:
        rc = int(args.func(args))
        logger.info("exit rc=%s", rc)
        return rc
    except Exception:
        logger.exception("unhandled error")
        raise


if __name__ == "__main__":
    raise SystemExit(main())
