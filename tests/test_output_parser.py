from core.output_parser import clean_line, lines_to_items, parse_items


def test_strips_list_markers_without_prefix_filter():
    parsed = parse_items("1. Describe X\n- Explain Y\n\nCLO3: Apply Z")
    assert parsed.items == ["Describe X", "Explain Y", "CLO3: Apply Z"]


def test_drops_headings_and_blank_lines():
    text = "# Heading\n## Sub\n\n   \n2) Phân tích dữ liệu\n• Trình bày kết quả\r\n* Đánh giá"
    assert lines_to_items(text) == ["Phân tích dữ liệu", "Trình bày kết quả", "Đánh giá"]


def test_clean_line_strips_number_then_bullet():
    assert clean_line("  3. - Vận dụng  ") == "Vận dụng"
    assert clean_line("12) Thiết kế") == "Thiết kế"


def test_marker_only_lines_are_dropped():
    assert lines_to_items("-\n1.\nreal") == ["real"]


def test_empty_or_none_text():
    assert parse_items("").items == []
    assert parse_items(None).items == []
    assert parse_items(None).raw == ""


def test_count_truncates_without_prefix_filter():
    assert parse_items("a\nb\nc", count=2).items == ["a", "b"]


def test_prefix_filter_keeps_matching_lines_only():
    text = "Đây là gợi ý:\nITEM1: Trình bày A\nITEM2: Phân tích B\nITEM3: Đánh giá C"
    parsed = parse_items(text, count=2, require_prefix=True)
    assert parsed.items == ["ITEM1: Trình bày A", "ITEM2: Phân tích B"]
    assert parsed.raw == text


def test_prefix_filter_borrows_unclaimed_lines():
    text = "ITEM1: Trình bày A\nVận dụng C\nITEM2: Phân tích B"
    parsed = parse_items(text, count=3, require_prefix=True)
    assert parsed.items == [
        "ITEM1: Trình bày A",
        "ITEM2: Phân tích B",
        "ITEM3: Vận dụng C",
    ]


def test_prefix_filter_is_case_insensitive_and_tolerates_spacing():
    parsed = parse_items("- item 1: A\n2. Item2 : B", count=2, require_prefix=True)
    assert parsed.items == ["item 1: A", "Item2 : B"]


def test_under_fill_is_allowed():
    parsed = parse_items("ITEM1: A", count=4, require_prefix=True)
    assert parsed.items == ["ITEM1: A"]


def test_raw_is_returned_unmodified():
    text = "  # Title\n1. ITEM1: A  \n"
    assert parse_items(text, count=1, require_prefix=True).raw == text
