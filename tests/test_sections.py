from event_planner.utils.sections import parse_detail_sections

ANSWER = """## 参考テンプレート

件名: ご案内
- 本文の箇条書きはそのまま残る

## チェックリスト

- 宛先の確認
・日時の確認
✓ 締切の明記

## 注意点

1. 早めに送る
* 返信期限を設ける

## 追加項目

- [ ] フォローアップ計画
"""


def test_sections_are_split_and_bullets_stripped():
    detail = parse_detail_sections(ANSWER)
    assert detail.template == "件名: ご案内\n- 本文の箇条書きはそのまま残る"
    assert detail.checklist == ["宛先の確認", "日時の確認", "締切の明記"]
    assert detail.notes == ["早めに送る", "返信期限を設ける"]
    assert detail.additional_items == ["フォローアップ計画"]


def test_missing_sections_leave_whole_text_as_template():
    text = "Just some prose without headings."
    detail = parse_detail_sections(text)
    assert detail.template == text
    assert detail.checklist == [] and detail.notes == [] and detail.additional_items == []


def test_checklist_only_answer_keeps_empty_template():
    detail = parse_detail_sections("## チェックリスト\n- a\n- b")
    assert detail.template == ""
    assert detail.checklist == ["a", "b"]


def test_deeper_headings_are_recognised():
    detail = parse_detail_sections(
        "### 参考テンプレート\n本文\n### チェックリスト\n- A\n- B\n#### 注意点\n- N\n"
    )
    assert detail.template == "本文"
    assert detail.checklist == ["A", "B"]
    assert detail.notes == ["N"]
