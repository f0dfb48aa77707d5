from mdrcluster._boot import boot
import logging

import sys
import click

from mdrcluster.commands.cli_cluster import cli_cluster
from mdrcluster.config.config import AppConfig

logging.basicConfig(stream=sys.stdout, level=AppConfig.LOGGING_LEVEL)
logging.getLogger('matplotlib').setLevel(logging.INFO)

s = boot()


@click.group()
@click.pass_context
def cli(ctx):
    @ctx.call_on_close
    def close_services():
        logging.debug('shutdown')
        s.shutdown()


cli_cluster(cli, s)

if __name__ == '__main__':
    cli()
