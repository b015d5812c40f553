"""Main CLI entry point"""

import sys

import click
import docker
from click.core import ParameterSource

from .client import APIClient
from .config import ConfigManager, DEFAULT_CONFIG_PATH
from .exceptions import ValidationError
from .logging_config import setup_logging, verbosity_to_level
from .multiplexer import run_like
from .options import DEFAULT_MAX_FOLLOW_CONCURRENCY, DEFAULT_TAIL, LikeOptions
from .sources.api_logs import api_log_requests
from .sources.docker_logs import docker_log_requests
from .utils import error_handler, parse_duration, parse_resource
from .writers import AutoFlushWriter


def _from_config(ctx: click.Context, name: str, value, configured):
    """Use the config file value unless the flag was given explicitly"""
    if ctx.get_parameter_source(name) == ParameterSource.DEFAULT:
        return configured
    return value


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.argument('resources', nargs=-1, required=True)
@click.option('--pattern', required=True,
              help='Regular expression; only log lines matching it are printed')
@click.option('--follow', '-f', is_flag=True, help='Specify if the logs should be streamed.')
@click.option('--timestamps', is_flag=True, help='Include timestamps on each line in the log output')
@click.option('--tail', type=int, default=DEFAULT_TAIL, show_default=True,
              help='Lines of recent log file to display; -1 shows all log lines.')
@click.option('--since', help='Only return logs newer than a relative duration like 5s, 2m, or 3h. '
                              'Only one of since-time / since may be used.')
@click.option('--since-time', help='Only return logs after a specific date (RFC3339). '
                                   'Only one of since-time / since may be used.')
@click.option('--limit-bytes', type=int, default=0,
              help='Maximum bytes of logs to return per source. Defaults to no limit.')
@click.option('--ignore-errors', is_flag=True,
              help='If watching / following logs, allow for any errors that occur to be non-fatal')
@click.option('--max-log-requests', type=int, default=DEFAULT_MAX_FOLLOW_CONCURRENCY, show_default=True,
              help='Specify maximum number of concurrent logs to follow.')
@click.option('--prefix', is_flag=True,
              help='Prefix each log line with the log source (service or container name)')
@click.option('--host', help='Host ID; read logs through the Docker Swarm Control API of the current context')
@click.option('--context', help='Override current context')
@click.option('--config', type=click.Path(dir_okay=False), default=str(DEFAULT_CONFIG_PATH),
              help='Config file location')
@click.option('--verbose', '-v', count=True, help='Diagnostic output on stderr; repeat for more')
@click.pass_context
@error_handler
def like(ctx, resources, pattern, follow, timestamps, tail, since, since_time, limit_bytes,
         ignore_errors, max_log_requests, prefix, host, context, config, verbose):
    """Print the logs of containers or services, keeping only lines that match --pattern.

    RESOURCES are container names or IDs, or TYPE/NAME with TYPE one of
    container or service.
    """
    setup_logging(verbosity_to_level(verbose))

    cfg = ConfigManager(config).load()
    defaults = cfg.defaults

    options = LikeOptions(
        pattern=pattern,
        follow=follow,
        ignore_errors=_from_config(ctx, 'ignore_errors', ignore_errors, defaults.ignore_errors),
        max_follow_concurrency=_from_config(ctx, 'max_log_requests', max_log_requests,
                                            defaults.max_log_requests),
        # More than one source is unreadable without tags
        prefix=_from_config(ctx, 'prefix', prefix, defaults.prefix) or len(resources) > 1,
        timestamps=_from_config(ctx, 'timestamps', timestamps, defaults.timestamps),
        tail=_from_config(ctx, 'tail', tail, defaults.tail),
        since_seconds=parse_duration(since) if since else None,
        since_time=since_time,
        limit_bytes=limit_bytes
    )
    options.validate()

    parsed = [parse_resource(resource) for resource in resources]

    if host:
        context_cfg = cfg.get_context(context)
        if context_cfg is None:
            raise ValidationError('--host requires a configured context, see --config')
        client = APIClient(
            base_url=context_cfg.api_url,
            token=context_cfg.token,
            verify_ssl=context_cfg.verify_ssl
        )
        requests = api_log_requests(client, host, parsed, options)
    else:
        requests = docker_log_requests(docker.from_env(), parsed, options)

    run_like(requests, AutoFlushWriter(sys.stdout.buffer), options)


if __name__ == '__main__':
    like()
