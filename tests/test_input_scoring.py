import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from dictation_target.dom import Viewport, snapshot_from_tree  # noqa: E402
from dictation_target.input_scoring import INPUT_RULES, score_input  # noqa: E402
from dictation_target.models import ScoreWeights  # noqa: E402

VIEWPORT = Viewport(width=1440, height=900)


def _field(tag="input", rect=(10, 10, 100, 30), attrs=None, style=None):
    document = snapshot_from_tree({"tag": tag, "rect": rect, "attrs": attrs or {}, "style": style or {}})
    return next(document.elements())


def test_rule_order_is_fixed():
    assert [name for name, _ in INPUT_RULES] == ["in_viewport", "keywords", "textarea", "size", "content_editable"]


def test_hidden_or_missing_fields_score_zero():
    assert score_input(None, VIEWPORT) == 0
    assert score_input(_field(attrs={"id": "chat"}, style={"display": "none"}), VIEWPORT) == 0


def test_small_field_in_viewport_gets_only_the_viewport_bonus():
    assert score_input(_field(), VIEWPORT) == 5


def test_offscreen_field_loses_the_viewport_bonus():
    assert score_input(_field(rect=(2000, 10, 100, 30)), VIEWPORT) == 0


def test_larger_field_outscores_smaller_identical_field():
    small = _field(attrs={"type": "text"}, rect=(10, 10, 50, 20))
    large = _field(attrs={"type": "text"}, rect=(100, 10, 300, 100))
    assert score_input(large, VIEWPORT) > score_input(small, VIEWPORT)
    assert score_input(large, VIEWPORT) == 5 + 5


def test_size_bonus_is_capped():
    huge = _field(rect=(0, 0, 1400, 800))
    assert score_input(huge, VIEWPORT) == 5 + 5


def test_textarea_beats_attribute_identical_text_input():
    attrs = {"name": "body", "placeholder": "Write here"}
    textarea = _field(tag="textarea", attrs=attrs)
    text_input = _field(tag="input", attrs={**attrs, "type": "text"})
    assert score_input(textarea, VIEWPORT) > score_input(text_input, VIEWPORT)
    assert score_input(textarea, VIEWPORT) - score_input(text_input, VIEWPORT) == 2


def test_chat_keyword_counts_once_per_attribute():
    one_attribute = _field(attrs={"placeholder": "Send a chat message"})
    two_attributes = _field(attrs={"placeholder": "Send a message", "aria-label": "Chat"})
    assert score_input(one_attribute, VIEWPORT) == 5 + 3
    assert score_input(two_attributes, VIEWPORT) == 5 + 3 + 3


def test_search_keyword_is_independent_of_chat_keyword():
    element = _field(attrs={"id": "comment-box", "placeholder": "Search comments"})
    # id: chat +3; placeholder: chat ("comment") +3 and search +2
    assert score_input(element, VIEWPORT) == 5 + 3 + 3 + 2


def test_japanese_keywords_and_class_attribute():
    assert score_input(_field(attrs={"placeholder": "メッセージを入力..."}), VIEWPORT) == 5 + 3
    assert score_input(_field(attrs={"class": "検索ボックス"}), VIEWPORT) == 5 + 2


def test_content_editable_is_a_tie_break_penalty():
    editor = _field(tag="div", attrs={"contenteditable": "true"})
    native = _field(tag="input")
    assert score_input(editor, VIEWPORT) == score_input(native, VIEWPORT) - 1


def test_custom_weights_are_honoured():
    weights = ScoreWeights(input_textarea=0)
    textarea = _field(tag="textarea")
    text_input = _field(tag="input")
    assert score_input(textarea, VIEWPORT, weights) == score_input(text_input, VIEWPORT, weights)


def test_scoring_is_repeatable():
    element = _field(tag="textarea", attrs={"id": "chat-input"}, rect=(500, 300, 600, 80))
    assert score_input(element, VIEWPORT) == score_input(element, VIEWPORT)
