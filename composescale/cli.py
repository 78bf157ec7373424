import argparse
import asyncio
import logging
import docker
import signal
import sys

from docker.errors import DockerException

from composescale import __version__
from composescale.auto_scaling import AutoScaleCoordinator, StrategyName
from composescale.backend import ComposeActuator, ComposeProject, ComposeServiceDiscovery, DockerStatsSampler
from composescale.config import load_config_file, load_policy, load_services
from composescale.constants import (
    DEFAULT_CPU_THRESHOLD, DEFAULT_INTERVAL, DEFAULT_MAX_REPLICAS, DEFAULT_MEM_THRESHOLD,
    DEFAULT_MIN_REPLICAS, DEFAULT_SAMPLE_TIMEOUT, DEFAULT_STRATEGY,
)
from composescale.errors import ComposeScaleError, ConfigurationError
from composescale.logger import ScaleLogger
from composescale.manual import parse_service_replicas, scale_services
from composescale.utils.data import load_env_file

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2

def build_parser():
    parser = argparse.ArgumentParser(prog="composescale", description="Scale Docker Compose services, by hand or automatically.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-p", "--project-name", help="Compose project name")
    parser.add_argument("-f", "--file", action="append", dest="files", help="Compose file (repeatable)")
    parser.add_argument("--config", help="YAML file with an 'autoscale' section")
    parser.add_argument("--env-file", default=".env", help="dotenv file loaded before reading CSCALE_* variables")
    parser.add_argument("--log-dir", help="also write a text log and a decision CSV to this directory")
    parser.add_argument("--log-level", default="CSCALE_STDOUT", help="minimum level written to every log sink (e.g. WARNING)")

    sub = parser.add_subparsers(dest="command", required=True)
    scale = sub.add_parser("scale", help="Scale services to fixed counts, or auto-scale them with --auto",
                           description="SERVICE=REPLICAS pairs for manual scaling; with --auto, optional SERVICE names to watch.")
    scale.add_argument("args", nargs="*", metavar="SERVICE[=REPLICAS]")
    scale.add_argument("--auto", action="store_true", help="Enable auto-scaling based on resource usage")
    scale.add_argument("--strategy", choices=[s.value for s in StrategyName],
                       help=f"Scaling strategy (default {DEFAULT_STRATEGY})")
    scale.add_argument("--cpu-threshold", type=float, help=f"CPU usage threshold in percent (default {DEFAULT_CPU_THRESHOLD})")
    scale.add_argument("--mem-threshold", type=float, help=f"Memory usage threshold in percent (default {DEFAULT_MEM_THRESHOLD})")
    scale.add_argument("--min-replicas", type=int, help=f"Minimum number of replicas (default {DEFAULT_MIN_REPLICAS})")
    scale.add_argument("--max-replicas", type=int, help=f"Maximum number of replicas (default {DEFAULT_MAX_REPLICAS})")
    scale.add_argument("--interval", type=float, help=f"Seconds between checks (default {DEFAULT_INTERVAL})")
    scale.add_argument("--sample-timeout", type=float, default=DEFAULT_SAMPLE_TIMEOUT, help="Seconds allowed for one stats read")
    scale.add_argument("--once", action="store_true", help="Run a single auto-scaling pass and exit")
    scale.add_argument("--duration", type=float, help="Stop auto-scaling after this many seconds")
    return parser

def build_backend(project, sample_timeout=DEFAULT_SAMPLE_TIMEOUT):
    """Creates the sampler, actuator and discovery for a project. Raises ConfigurationError without a Docker daemon."""

    try:
        # The transport timeout also bounds stats reads the sampler has already given up on.
        client = docker.from_env(timeout=sample_timeout)
    except DockerException as e:
        raise ConfigurationError(f"cannot connect to Docker: {e}") from e

    return (
        DockerStatsSampler(project, client=client, timeout=sample_timeout),
        ComposeActuator(project),
        ComposeServiceDiscovery(project, client=client),
    )

def _install_stop_handlers(loop, stop_event):
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no signal handlers; Ctrl+C surfaces as KeyboardInterrupt.
            pass

async def run_auto(opts, project, logger, file_config):
    policy = load_policy({
        "strategy": opts.strategy,
        "cpu_threshold": opts.cpu_threshold,
        "mem_threshold": opts.mem_threshold,
        "min_replicas": opts.min_replicas,
        "max_replicas": opts.max_replicas,
        "interval": opts.interval,
    }, file_config)
    services = load_services(opts.args, file_config)
    if opts.duration is not None and not opts.duration > 0:
        raise ConfigurationError(f"duration must be positive, got {opts.duration:g}")

    sampler, actuator, discovery = build_backend(project, opts.sample_timeout)
    coordinator = AutoScaleCoordinator(sampler, actuator, discovery, logger)

    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()
    _install_stop_handlers(loop, stop_event)
    if opts.duration is not None:
        loop.call_later(opts.duration, stop_event.set)

    await coordinator.run(policy, services, stop_event=stop_event, max_ticks=1 if opts.once else None)

async def run_manual(opts, project, logger):
    if not opts.args:
        raise ConfigurationError("manual scaling requires at least one SERVICE=REPLICAS argument")
    replicas = parse_service_replicas(opts.args)

    _, actuator, discovery = build_backend(project)
    await scale_services(replicas, actuator, discovery, logger)

def main(argv=None):
    opts = build_parser().parse_args(argv)

    load_env_file(opts.env_file)
    logger = ScaleLogger(dirname=opts.log_dir)
    level = logging.getLevelName(opts.log_level.upper())
    if isinstance(level, int):
        logger.setLevel(level)

    try:
        file_config = load_config_file(opts.config)
        project = ComposeProject.resolve(opts.project_name, opts.files)

        if opts.auto:
            asyncio.run(run_auto(opts, project, logger, file_config))
        else:
            asyncio.run(run_manual(opts, project, logger))
    except ConfigurationError as e:
        logger.warn_log("Error: %s", e)
        return EXIT_CONFIG
    except ComposeScaleError as e:
        logger.warn_log("Error: %s", e)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.std_log("Auto-scaling stopped.")

    return EXIT_OK

if __name__ == "__main__":
    sys.exit(main())
