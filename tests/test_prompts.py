from event_planner.prompts import build_details_prompt, build_tasks_prompt, focus_for_task


def test_tasks_prompt_embeds_event_and_schema(meetup_form):
    prompt = build_tasks_prompt(meetup_form)
    assert "Meetup" in prompt
    assert "2025-06-01" in prompt
    assert "ネットワーキング交流会" in prompt
    assert '"dueDate": "YYYY-MM-DD形式の日付"' in prompt
    for category in ("集客・広報", "当日運営準備", "イベント実行", "フォローアップ"):
        assert category in prompt


def test_details_prompt_asks_for_four_sections_and_adds_focus():
    prompt = build_details_prompt("招待状送付（メール）", "集客・広報", "Meetup", "2025-06-01", "d")
    for heading in ("## 参考テンプレート", "## チェックリスト", "## 注意点", "## 追加項目"):
        assert heading in prompt
    assert "B2Bメールマーケティング" in prompt


def test_focus_selection():
    assert "リマインド" in focus_for_task("リマインド通知配信")
    assert "受付" in focus_for_task("受付フロー設計＆台本作成")
    assert "アンケート" in focus_for_task("参加者アンケート配信")
    assert focus_for_task("会場予約") is None
