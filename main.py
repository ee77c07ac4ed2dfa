"""
Точка входа для HE-Translator.

Командная строка для этапов конвейера. Этапы обмениваются JSON файлами
с прямоугольниками в формате фронтенда:

  detect    input.pdf -o rects.json
  extract   input.pdf rects.json -o items.json
  translate items.json -o translated.json
  render    input.pdf translated.json output.pdf [--logo logo.png] [--instructions ins.json]
  run       input.pdf output.pdf [--rectangles rects.json] [--logo logo.png]
  check     проверка доступности OpenAI API
"""

from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from he_translator.api.openai_vision import check_connection
from he_translator.core.exceptions import HETranslatorError
from he_translator.core.models import LogoPlacement, Rectangle, Translation
from he_translator.processing.pipeline import (
    detect_rectangles,
    extract_rectangles,
    read_text_runs,
    render_pdf,
    run_pipeline,
    translate_rectangles,
)


def setup_logging(verbose: bool = False):
    """Настройка логирования."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def read_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Optional[str], data: Any) -> None:
    """Пишет JSON в файл или в stdout, если путь не задан."""
    text = json.dumps(data, ensure_ascii=False, indent=2)
    if path:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        logging.info(f"Записано: {path}")
    else:
        print(text)


def load_rectangles(path: str) -> List[Rectangle]:
    data = read_json(path)
    if isinstance(data, dict):
        data = data.get("rectangles", [])
    return [Rectangle.from_dict(d) for d in data]


def load_translations(path: str) -> List[Translation]:
    data = read_json(path)
    if isinstance(data, dict):
        data = data.get("translations", [])
    return [Translation.from_dict(d) for d in data]


def parse_logo_position(value: Optional[str]) -> Optional[LogoPlacement]:
    """
    Положение логотипа: "x,y,width,height" в frontend space или путь к JSON.
    """
    if not value:
        return None
    parts = value.split(",")
    if len(parts) == 4:
        try:
            x, y, w, h = (float(p) for p in parts)
        except ValueError as e:
            raise argparse.ArgumentTypeError(f"Invalid logo position: {value}") from e
        return LogoPlacement(x, y, w, h)
    return LogoPlacement.from_dict(read_json(value))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="he-translator",
        description="Перевод текстовых блоков PDF на иврит с наложением поверх оригинала",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Подробный лог (DEBUG)"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("detect", help="Найти текстовые блоки")
    p.add_argument("input", help="Исходный PDF")
    p.add_argument("-o", "--output", help="JSON с прямоугольниками (по умолчанию stdout)")

    p = sub.add_parser("extract", help="Извлечь текст из прямоугольников")
    p.add_argument("input", help="Исходный PDF")
    p.add_argument("rectangles", help="JSON с прямоугольниками")
    p.add_argument("-o", "--output", help="JSON с извлечённым текстом")

    p = sub.add_parser("translate", help="Перевести извлечённый текст")
    p.add_argument("items", help="JSON после extract")
    p.add_argument("-o", "--output", help="JSON с переводами")
    p.add_argument(
        "--min-interval",
        type=float,
        default=None,
        help="Минимальная пауза между запросами к сервису, сек",
    )

    p = sub.add_parser("render", help="Наложить перевод на PDF")
    p.add_argument("input", help="Исходный PDF")
    p.add_argument("translations", help="JSON после translate")
    p.add_argument("output", help="Выходной PDF")
    p.add_argument("--logo", help="Картинка логотипа")
    p.add_argument("--logo-position", help='"x,y,width,height" или JSON файл')
    p.add_argument("--instructions", help="Сохранить инструкции отрисовки в JSON")

    p = sub.add_parser("run", help="Весь конвейер целиком")
    p.add_argument("input", help="Исходный PDF")
    p.add_argument("output", help="Выходной PDF")
    p.add_argument("--rectangles", help="JSON с прямоугольниками (иначе автодетекция)")
    p.add_argument("--logo", help="Картинка логотипа")
    p.add_argument("--logo-position", help='"x,y,width,height" или JSON файл')
    p.add_argument("--min-interval", type=float, default=None)
    p.add_argument("--no-metrics", action="store_true", help="Не писать metrics.csv")

    sub.add_parser("check", help="Проверить доступность OpenAI API")

    return parser


def _interval_kwargs(args: argparse.Namespace) -> dict:
    if args.min_interval is None:
        return {}
    return {"min_interval": args.min_interval}


def run_command(args: argparse.Namespace) -> int:
    if args.command == "detect":
        rects = detect_rectangles(read_text_runs(args.input))
        write_json(args.output, [r.to_dict() for r in rects])

    elif args.command == "extract":
        pages = read_text_runs(args.input)
        items = extract_rectangles(load_rectangles(args.rectangles), pages)
        write_json(args.output, [i.to_dict() for i in items])

    elif args.command == "translate":
        items = translate_rectangles(
            load_translations(args.items), **_interval_kwargs(args)
        )
        write_json(args.output, [i.to_dict() for i in items])

    elif args.command == "render":
        instructions = render_pdf(
            args.input,
            args.output,
            load_translations(args.translations),
            logo=args.logo,
            logo_placement=parse_logo_position(args.logo_position),
        )
        if args.instructions:
            write_json(args.instructions, [i.to_dict() for i in instructions])

    elif args.command == "run":
        rects = load_rectangles(args.rectangles) if args.rectangles else None
        run_pipeline(
            args.input,
            args.output,
            rectangles=rects,
            logo=args.logo,
            logo_placement=parse_logo_position(args.logo_position),
            write_metrics=not args.no_metrics,
            **_interval_kwargs(args),
        )

    elif args.command == "check":
        status = check_connection()
        write_json(None, status)
        return 0 if status["success"] else 1

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Главная функция запуска приложения."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        return run_command(args)
    except HETranslatorError as e:
        logging.error(f"Ошибка: {e}")
        return 1
    except (OSError, ValueError, argparse.ArgumentTypeError) as e:
        logging.error(f"Ошибка входных данных: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
