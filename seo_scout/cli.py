# === FILE: seo_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска SeoScout через командную строку.

Команды:
  auth-url    Ссылка на страницу согласия Google (offline access)
  exchange    Обменять authorization code на access/refresh токены
  refresh     Получить новый access token по refresh token
  crawl       Обойти sitemap сайта и вывести список URL
  metrics     Метрики Search Console для одной страницы (с одним refresh+повтором)
  properties  Список доступных свойств Search Console
  anchor      Сгенерировать анкор-текст для URL
  config      Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)

Дополнительно:
  --version, -v       Показать версию SeoScout

Пример:
  seo-scout crawl example.com --json reports/sitemap.json --pretty
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from seo_scout import __version__
from seo_scout.config import load_config
from seo_scout.engine import Engine
from seo_scout.errors import SeoScoutError
from seo_scout.gsc.properties import PropertyLister
from seo_scout.logger import init_logging, logger
from seo_scout.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])

_SECRET_FIELDS = {("google", "client_secret"), ("llm", "api_key")}


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def echo_json(data, pretty: bool = True):
    click.echo(json.dumps(data, ensure_ascii=False, indent=2 if pretty else None))


def run(coro):
    """Запускает корутину; ошибки SeoScout превращаются в понятное сообщение без traceback."""
    try:
        return asyncio.run(coro)
    except SeoScoutError as exc:
        logger.debug("%s: %s", type(exc).__name__, exc)
        print_error(f'{exc.user_message} [{exc.category}] {exc}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SeoScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file):
    """Группа команд SeoScout CLI."""
    init_logging(level=log_level, log_file=str(log_file) if log_file else None)
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg
    ctx.obj['engine'] = Engine(cfg)


@cli.command('auth-url', context_settings=CONTEXT_SETTINGS)
@click.option('--state', default=None, help='Значение state (CSRF)')
@click.option('--redirect-uri', default=None, help='Переопределить redirect URI')
@click.pass_context
def auth_url(ctx, state, redirect_uri):
    """Вывести ссылку на страницу согласия Google."""
    try:
        broker = ctx.obj['engine'].token_broker()
        click.echo(broker.authorization_url(state=state, redirect_uri=redirect_uri))
    except SeoScoutError as exc:
        print_error(f'{exc.user_message} [{exc.category}] {exc}')


@cli.command('exchange', context_settings=CONTEXT_SETTINGS)
@click.argument('code')
@click.option('--redirect-uri', default=None, help='Redirect URI, использованный при авторизации')
@click.pass_context
def exchange(ctx, code, redirect_uri):
    """Обменять authorization code на токены."""
    engine = ctx.obj['engine']

    async def _exchange():
        async with engine.token_broker() as broker:
            return await broker.exchange_code(code, redirect_uri)

    echo_json(run(_exchange()).to_dict())


@cli.command('refresh', context_settings=CONTEXT_SETTINGS)
@click.argument('refresh_token')
@click.pass_context
def refresh(ctx, refresh_token):
    """Получить новый access token по refresh token."""
    engine = ctx.obj['engine']

    async def _refresh():
        async with engine.token_broker() as broker:
            return await broker.refresh_access_token(refresh_token)

    grant = run(_refresh())
    echo_json({'access_token': grant.access_token, 'expires_in': grant.expires_in})


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def crawl(ctx, url, json_output, pretty):
    """Обойти sitemap сайта (или указанный sitemap .xml)."""
    result = run(ctx.obj['engine'].crawl(url))
    for failure in result.failures:
        click.secho(f'warning: {failure.sitemap_url}: {failure.reason}', fg='yellow', err=True)

    if json_output:
        try:
            saved = render_json(result, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
        return
    echo_json(result.to_dict(), pretty=pretty)


@cli.command('metrics', context_settings=CONTEXT_SETTINGS)
@click.option('--token', 'access_token', required=True, help='Access token Google')
@click.option('--site', 'site_url', required=True, help='Свойство Search Console (https://example.com/ или sc-domain:example.com)')
@click.option('--page', 'page_url', required=True, help='Точный URL страницы')
@click.option('--refresh-token', default=None, help='Refresh token для одного повтора при истёкшем access token')
@click.pass_context
def metrics(ctx, access_token, site_url, page_url, refresh_token):
    """Метрики страницы за последние дни (окно из конфига)."""
    outcome = run(ctx.obj['engine'].page_metrics(access_token, site_url, page_url, refresh_token))
    data = outcome.metric.to_dict()
    if outcome.refreshed is not None:
        data['refreshed_access_token'] = outcome.refreshed.access_token
        data['expires_in'] = outcome.refreshed.expires_in
    echo_json(data)


@cli.command('properties', context_settings=CONTEXT_SETTINGS)
@click.option('--token', 'access_token', required=True, help='Access token Google')
@click.pass_context
def properties(ctx, access_token):
    """Свойства Search Console с правами siteOwner / siteFullUser."""
    cfg = ctx.obj['config']

    async def _list():
        async with PropertyLister(cfg.search_console) as lister:
            return await lister.list_properties(access_token)

    echo_json([p.to_dict() for p in run(_list())])


@cli.command('anchor', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--title', default=None, help='Заголовок целевой страницы')
@click.option('--from-url', default=None, help='Страница, с которой ставится ссылка')
@click.pass_context
def anchor(ctx, url, title, from_url):
    """Сгенерировать анкор-текст для URL."""
    click.echo(run(ctx.obj['engine'].anchor(url, title, from_url)))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON (секреты скрыты)."""
    data = ctx.obj['config'].model_dump(mode='json')
    for section, key in _SECRET_FIELDS:
        if data[section].get(key):
            data[section][key] = '***'
    echo_json(data)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
