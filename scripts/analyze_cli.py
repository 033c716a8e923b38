#!/usr/bin/env python
"""
Ngũ Hành number analyzer CLI

Usage:
    python scripts/analyze_cli.py run                          # prompt for menh, sodienthoai.txt -> result.txt
    python scripts/analyze_cli.py run in.txt out.txt           # custom input/output files
    python scripts/analyze_cli.py run in.txt out.txt cfg.json  # full AnalyzeConfig from a JSON file
    python scripts/analyze_cli.py check 0912345678 Kim         # check a single number
"""

import sys
import time
from pathlib import Path
from typing import Optional

# add the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from nguhanh.config import settings, setup_logging
from nguhanh.pipeline import AnalysisPipeline, format_results
from nguhanh.schemas import AnalyzeConfig, Element, Valid

MENH_MENU = {
    "1": Element.KIM,
    "2": Element.MOC,
    "3": Element.THUY,
    "4": Element.HOA,
    "5": Element.THO,
}


def prompt_menh() -> Element:
    """Asks for the menh until a valid menu choice is entered."""
    while True:
        print("Vui lòng nhập Bản Mệnh của bạn:")
        for key, element in MENH_MENU.items():
            print(f"  {key}: {element.label}")
        choice = input().strip()
        if choice in MENH_MENU:
            return MENH_MENU[choice]
        print("Lựa chọn không hợp lệ, vui lòng nhập một số từ 1 đến 5.")


def load_config(config_path: Optional[str] = None) -> AnalyzeConfig:
    if config_path:
        path = Path(config_path)
        if path.exists():
            return AnalyzeConfig.from_payload(path.read_text(encoding="utf-8"))
        print(f"⚠️  Config file not found: {config_path}, using defaults")
        return AnalyzeConfig()

    menh = prompt_menh()
    print(f"Đã chọn mệnh: {menh.label}\n")
    return AnalyzeConfig(user_menh=menh)


def cmd_run(input_file: Optional[str] = None, output_file: Optional[str] = None, config_path: Optional[str] = None):
    """Batch run: read numbers, rank, write results."""
    started = time.perf_counter()
    input_path = Path(input_file or settings.INPUT_FILE)
    output_path = Path(output_file or settings.OUTPUT_FILE)

    config = load_config(config_path)

    try:
        content = input_path.read_text(encoding="utf-8")
    except OSError:
        print(f"❌ Lỗi: Không thể tìm thấy hoặc đọc file '{input_path}'.")
        return

    pipeline = AnalysisPipeline(config)
    report = pipeline.analyze(content.splitlines())

    print(f"Đã tìm thấy {report.passed_count} số hợp lệ sau khi lọc. Đang sắp xếp và ghi ra file...")

    text = format_results(report.results)
    output_path.write_text(text + "\n" if text else "", encoding="utf-8")

    elapsed = time.perf_counter() - started
    print("=" * 40)
    print(f"  {report.summary}")
    for stage, count in report.rejected_by_stage.items():
        print(f"  rejected at {stage}: {count}")
    print(f"  Đã ghi kết quả đã sắp xếp vào {output_path}")
    print(f"  Thời gian chạy: {elapsed:.2f}s")
    print("=" * 40)


def cmd_check(number: str, menh: Optional[str] = None):
    """Single-number check."""
    config = AnalyzeConfig.from_payload({"user_menh": menh} if menh else None)
    outcome = AnalysisPipeline(config).check(number)

    if isinstance(outcome, Valid):
        print(f"✅ Hợp lệ. Điểm: {outcome.score:.2f}")
    else:
        print(f"❌ Không hợp lệ: {outcome.reason}")


def print_help():
    """Prints usage."""
    print(__doc__)
    print("Menh: " + ", ".join(f"{e.label} ({e.english})" for e in MENH_MENU.values()))


def main():
    setup_logging()

    if len(sys.argv) < 2:
        print_help()
        return

    command = sys.argv[1].lower()
    args = sys.argv[2:]

    if command == "run":
        cmd_run(*args[:3])
    elif command == "check":
        if not args:
            print("❌ check needs a number")
            print_help()
            return
        cmd_check(*args[:2])
    elif command in ["help", "-h", "--help"]:
        print_help()
    else:
        print(f"❌ Unknown command: {command}")
        print_help()


if __name__ == "__main__":
    main()
