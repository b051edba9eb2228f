from __future__ import annotations

from event_planner.models import EventForm

TASKS_SYSTEM = (
    "あなたはイベント企画・運営の専門家です。"
    "提供された情報から、実践的で包括的なタスクリストをJSON形式で作成してください。"
)

TASKS_USER_TEMPLATE = """あなたはイベント企画・運営の専門家です。
以下の情報を元に、交流会の開催に必要なタスクリストを作成してください。

【イベント名】
{title}

【開催日】
{date}

【イベント種別】
{type_label}

【イベント詳細】
{details}

【要件】
以下のカテゴリごとにタスクを洗い出してください：

1. 集客・広報
   - メール文案作成
   - 招待状送付（メール）
   - リマインド通知配信（参加確定者向け）
   - 既存企業へのお声がけ
   - SNS・Webサイトでの告知
   - プレスリリース作成・配信（必要に応じて）
   など

2. 当日運営準備
   - 受付フロー設計＆台本作成
   - 名札・備品搬入リスト作成
   - 受付・誘導担当の役割分担
   - 音響／マイクチェック
   - プログラム進行リハーサル
   など

3. イベント実行
   - 受付開始
   - 開会挨拶・趣旨説明
   - 登壇者ピッチ
   - 交流タイム
   - クロージング・次回告知
   - 片付け・撤収
   など

4. フォローアップ
   - 参加者アンケート配信
   - 獲得アポ件数の集計
   - リードフォローリスト作成
   - 成果報告レポート作成
   - 次回振り返りMTG設定
   など

【出力形式】
JSON形式で以下の構造で出力してください：

{{
  "tasks": [
    {{
      "category": "カテゴリ名",
      "items": [
        {{
          "name": "タスク名",
          "dueDate": "YYYY-MM-DD形式の日付",
          "status": "pending",
          "subtasks": ["サブタスク1", "サブタスク2"]
        }}
      ]
    }}
  ]
}}

【注意事項】
- 各タスクには適切な期限日を設定してください（イベント日を基準に前後で設定）
- サブタスクは必要な場合のみ含めてください
- イベント詳細を考慮して、適切なタスクを追加してください
- 全てのタスクのstatusは"pending"に設定してください
- 日付はYYYY-MM-DD形式で出力してください

タスクリストを作成してください："""

DETAILS_SYSTEM = (
    "あなたはB2Bマーケティングとイベント企画・運営の専門家です。"
    "B2Bマーケティングのセオリーとベストプラクティスに基づいて、"
    "提供されたタスクに関する実践的な参考資料、テンプレート、注意点を詳しく説明してください。"
    "B2Bマーケティングでは、意思決定者へのアプローチ、ビジネス価値の明確な訴求、"
    "ROIの提示、専門性と信頼性が重要です。"
)

# Section headings shared with utils.sections
HEADING_TEMPLATE = "参考テンプレート"
HEADING_CHECKLIST = "チェックリスト"
HEADING_NOTES = "注意点"
HEADING_ADDITIONAL = "追加項目"

DETAILS_USER_TEMPLATE = """あなたはB2Bマーケティングの専門家です。
以下のタスクに関するB2Bマーケティングのセオリーに基づいた参考資料を作成してください。

【タスク名】
{task_name}

【カテゴリ】
{category}

【イベント情報】
- イベント名: {event_title}
- 開催日: {event_date}
- 詳細: {event_details}

【重要】B2Bマーケティングの特徴を考慮してください：
- 意思決定者へのアプローチが重要
- ビジネス価値（ROI、効率化、コスト削減など）を明確に訴求
- 専門性と信頼性を重視
- 段階的なコミュニケーション（フォローアップが重要）
- 長期的な関係構築を意識
- データや事例を活用
- ビジネス用語を適切に使用

【作成してほしい内容】
1. 参考テンプレート・例文（B2Bマーケティングのベストプラクティスに基づいた実用的な形式で）
2. チェックリスト（B2Bマーケティングで重要な項目）
3. 注意点・ポイント（B2Bマーケティング特有の注意事項）
4. 追加で検討すべき項目（B2Bマーケティングで効果的な追加施策）

【出力形式】
以下の形式で出力してください：

## {h_template}

（B2Bマーケティングのベストプラクティスに基づいた実際に使用できるテンプレートを記載）

## {h_checklist}

（B2Bマーケティングで重要なチェック項目を箇条書きで）

## {h_notes}

（B2Bマーケティング特有の重要なポイントを箇条書きで）

## {h_additional}

（B2Bマーケティングで効果的な追加で検討すべき項目を箇条書きで）"""

# First matching entry wins.
DETAIL_FOCUS: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("メール", "招待状"),
        """【B2Bメールマーケティングの重要ポイント】
- 件名はビジネス価値を明確に（「ROI向上」「業務効率化」「成功事例」など）
- 冒頭で意思決定者にとってのメリットを明示
- イベント参加による具体的なビジネス成果を記載
- 参加者の役職・業種を意識した内容
- データや統計、成功事例を活用
- CTA（行動喚起）を明確に
- 期限や締切日を明確に記載
- 会社名・役職などの必須情報を記載""",
    ),
    (
        ("リマインド",),
        """【B2Bリマインドメールの重要ポイント】
- イベント前日または数日前に送信（B2Bは意思決定に時間がかかるため余裕をもって）
- ビジネス価値の再確認（参加するメリットを再度強調）
- 会場情報、時間、アクセス方法を詳細に
- 参加者の役職・業種に応じた内容
- ネットワーキングの価値も強調
- 直前キャンセルの連絡方法も記載""",
    ),
    (
        ("受付", "台本"),
        """【特に注意してほしい点】
- 受付の流れを明確に（来場から着席まで）
- 担当者の役割分担を明確に
- よくある質問への対応方法
- トラブル時の対応フロー
- 来場者への案内文も含める""",
    ),
    (
        ("アンケート",),
        """【B2Bアンケートの重要ポイント】
- イベント直後（記憶が新鮮なうち）に送信
- 質問項目は簡潔に（ビジネスパーソンは時間が限られているため5-10問程度）
- ビジネス成果の測定（ROI、業務改善への影響など）
- 満足度、改善点、次回参加意向を確認
- 業種・役職別の回答も確認
- 選択肢と自由記述を組み合わせ（効率的に回答できるように）
- 謝辞とフォローアップの案内も含める""",
    ),
)


def build_tasks_prompt(form: EventForm) -> str:
    return TASKS_USER_TEMPLATE.format(
        title=form.title,
        date=form.date_iso,
        type_label=form.type_label,
        details=form.details,
    )


def focus_for_task(task_name: str) -> str | None:
    for keywords, focus in DETAIL_FOCUS:
        if any(keyword in task_name for keyword in keywords):
            return focus
    return None


def build_details_prompt(
    task_name: str,
    category: str | None,
    event_title: str,
    event_date: str | None,
    event_details: str,
) -> str:
    prompt = DETAILS_USER_TEMPLATE.format(
        task_name=task_name,
        category=category or "",
        event_title=event_title,
        event_date=event_date or "",
        event_details=event_details,
        h_template=HEADING_TEMPLATE,
        h_checklist=HEADING_CHECKLIST,
        h_notes=HEADING_NOTES,
        h_additional=HEADING_ADDITIONAL,
    )
    focus = focus_for_task(task_name)
    if focus:
        prompt += "\n\n" + focus
    return prompt
