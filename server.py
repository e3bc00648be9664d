#!/usr/bin/env python3
"""
Management script for the Ridepool development data store.
"""

import os
import sys
import json
import time
import signal
import shutil
import subprocess
from typing import Optional

import click

import dev_server

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PID_FILE = os.path.join(BASE_DIR, 'server.pid')
LOG_FILE = os.path.join(BASE_DIR, 'server.log')


def db_path() -> str:
    return os.path.abspath(os.getenv("RIDEPOOL_DB_FILE", os.path.join(BASE_DIR, 'data', 'db.json')))


def write_empty_db(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w') as f:
        json.dump(dev_server.empty_db(), f, indent=2)


def read_pid() -> Optional[int]:
    """PID of the running store, None without a PID file. Drops unreadable PID files."""
    if not os.path.exists(PID_FILE):
        return None
    with open(PID_FILE, 'r') as f:
        raw = f.read().strip()
    try:
        return int(raw)
    except ValueError:
        click.echo(f"Removing PID file with invalid content: {raw!r}", err=True)
        os.remove(PID_FILE)
        return None


def is_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except OSError:
        return False
    return True


@click.group()
def cli():
    """Ridepool data store management CLI."""
    pass


@cli.command()
@click.option('--port', default=3000, help='Port to serve the store on')
def start(port):
    """Start the data store in the background."""
    pid = read_pid()
    if pid is not None:
        click.echo(f"Data store already running with PID {pid}")
        click.echo(f"If it is not, delete {PID_FILE} and try again")
        return

    path = db_path()
    if not os.path.exists(path):
        click.echo(f"Creating empty database at {path}")
        write_empty_db(path)

    env = dict(os.environ, PORT=str(port), RIDEPOOL_DB_FILE=path)
    # Nothing reads the store's output after startup, so it goes to a file
    try:
        with open(LOG_FILE, 'a') as log:
            process = subprocess.Popen([sys.executable, os.path.abspath(dev_server.__file__)],
                                       env=env, stdout=log, stderr=subprocess.STDOUT)
    except OSError as e:
        click.echo(f"Error starting data store: {str(e)}", err=True)
        return

    # Give Flask a moment to bind the port
    time.sleep(1)
    if process.poll() is not None:
        click.echo(f"Data store failed to start! See {LOG_FILE}", err=True)
        return

    with open(PID_FILE, 'w') as f:
        f.write(str(process.pid))
    click.echo(f"Data store running at http://localhost:{port} (PID {process.pid}, database {path})")


@cli.command()
def stop():
    """Stop the data store."""
    pid = read_pid()
    if pid is None:
        click.echo("Data store is not running")
        return

    if is_alive(pid):
        os.kill(pid, signal.SIGTERM)
        time.sleep(1)
        if is_alive(pid):
            click.echo("Data store ignored SIGTERM, sending SIGKILL")
            os.kill(pid, signal.SIGKILL)
    os.remove(PID_FILE)
    click.echo(f"Data store with PID {pid} stopped")


@cli.command()
def status():
    """Check if the data store is running."""
    pid = read_pid()
    if pid is None:
        click.echo("Data store is not running")
    elif is_alive(pid):
        click.echo(f"Data store is running with PID {pid}")
    else:
        click.echo(f"Stale PID file for PID {pid}, the data store is not running")


@cli.command()
def reset():
    """Empty every collection, keeping a backup of the old database."""
    path = db_path()
    if not os.path.exists(path):
        click.echo(f"Database file not found: {path}")
        return

    backup_path = f"{path}.bak"
    shutil.copyfile(path, backup_path)
    write_empty_db(path)
    click.echo(f"Database reset. Backup created at {backup_path}")


if __name__ == '__main__':
    cli()
