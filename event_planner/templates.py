"""Deterministic fallbacks used when the model is unavailable or unusable."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from event_planner.models import TaskDetail, TaskStatus
from event_planner.utils.time import add_days, format_date


@dataclass(frozen=True, slots=True)
class PlannedTask:
    name: str
    offset_days: int
    time: str | None = None
    subtasks: tuple[str, ...] = field(default_factory=tuple)


PROMOTION = "集客・広報"
PREPARATION = "当日運営準備"
EXECUTION = "イベント実行"
FOLLOW_UP = "フォローアップ"

CATEGORIES = (PROMOTION, PREPARATION, EXECUTION, FOLLOW_UP)

FALLBACK_PLAN: tuple[tuple[str, tuple[PlannedTask, ...]], ...] = (
    (
        PROMOTION,
        (
            PlannedTask(
                "メール文案作成",
                -60,
                subtasks=("招待状送付（メール）", "リマインド通知配信（参加確定者向け）"),
            ),
            PlannedTask("既存企業へのお声がけ", -60),
            PlannedTask("SNS・Webサイトでの告知", -50),
        ),
    ),
    (
        PREPARATION,
        (
            PlannedTask("受付フロー設計＆台本作成", -43),
            PlannedTask("名札・備品搬入リスト作成", -14),
            PlannedTask("受付・誘導担当の役割分担", -14),
            PlannedTask("音響／マイクチェック", -14),
            PlannedTask("プログラム進行リハーサル", -14),
        ),
    ),
    (
        EXECUTION,
        (
            PlannedTask("受付開始", 0, time="18:30～"),
            PlannedTask("開会挨拶・趣旨説明", 0, time="19:00"),
            PlannedTask("登壇者によるピッチ", 0, time="19:10～19:30"),
            PlannedTask("交流タイム", 0, time="19:30～21:00"),
            PlannedTask("クロージング・次回告知", 0, time="21:00"),
            PlannedTask("片付け・撤収", 0, time="21:00～21:30"),
        ),
    ),
    (
        FOLLOW_UP,
        (
            PlannedTask("参加者アンケート配信", 1),
            PlannedTask("獲得アポ件数の集計", 0),
            PlannedTask("リードフォローリスト作成", 0),
            PlannedTask("成果報告レポート作成", 0),
            PlannedTask("次回振り返りMTG設定", 0),
        ),
    ),
)


def fallback_task_payload(event_date: date) -> dict[str, Any]:
    """Build the template plan in the same shape the model is asked for."""

    categories = []
    for category, planned in FALLBACK_PLAN:
        items = []
        for task in planned:
            item: dict[str, Any] = {
                "name": task.name,
                "dueDate": format_date(add_days(event_date, task.offset_days)),
                "status": TaskStatus.PENDING.value,
            }
            if task.subtasks:
                item["subtasks"] = list(task.subtasks)
            if task.time:
                item["time"] = task.time
            items.append(item)
        categories.append({"category": category, "items": items})
    return {"tasks": categories}


# ------------------------------------------------------------------ advisories
_EMAIL_DRAFT = """件名: 【ご案内】{event_title} - ビジネス成果を高める実践的ノウハウを共有

[会社名] 様
[役職名] 様

いつもお世話になっております。
[会社名]の[名前]です。

この度、{event_title}を開催いたします。
本イベントでは、[具体的なビジネス価値・成果]について、実践的なノウハウと成功事例を共有いたします。

【イベント概要】
- 日時: {event_date} [時刻]
- 場所: [会場名]
- 定員: [人数]名（先着順）
- 参加費: [金額]（税込）

【参加いただくメリット】
・[具体的なビジネス成果1: 例「ROI向上のための実践手法」]
・[具体的なビジネス成果2: 例「業務効率化の成功事例」]
・[具体的なビジネス成果3: 例「同業他社とのネットワーキング機会」]

【プログラム概要】
[プログラムの詳細を記載]

【お申し込み方法】
[申し込み方法・URLを記載]
※ お申し込み期限: [日付]まで

【お問い合わせ】
[問い合わせ先・メールアドレス・電話番号]

ご多忙中恐れ入りますが、ぜひご参加いただけますと幸いです。
皆様にお会いできることを楽しみにしております。

[送信者名]
[会社名]
[役職]
[連絡先]"""

_INVITATION = """件名: 【特別ご招待】{event_title} - ビジネスパートナー様限定

[会社名]
[部署名]
[役職名] [氏名] 様

いつも大変お世話になっております。
[会社名]の[名前]です。

この度、ビジネスパートナー様限定で{event_title}を開催いたします。
本イベントでは、[具体的なビジネス価値]について、[著名な講師名/企業名]による特別セッションを予定しております。

【イベント詳細】
- 日時: {event_date} [時刻]～[終了時刻]
- 場所: [会場名]
- 住所: [住所]
- 参加費: [金額]（通常価格[金額]より[割引率]%OFF）
- 定員: [人数]名様

【本イベントで得られる価値】
・[ビジネス成果1: 例「売上向上のための実践的アプローチ」]
・[ビジネス成果2: 例「同業他社の成功事例の共有」]
・[ビジネス成果3: 例「最新トレンドとその活用方法」]

【プログラム】
[詳細なプログラムを記載]

【お申し込み】
[申し込みURLまたはフォーム]
※ お申し込み期限: [日付]まで

ご多忙中恐れ入りますが、ぜひご参加いただけますようお願い申し上げます。

[送信者名]
[会社名]
[役職]
[連絡先]"""

_REMINDER = """件名: 【リマインド】{event_title} 明日開催です！

{event_title} リマインド

[参加者名] 様

{event_title}にご参加いただき、ありがとうございます。

明日、{event_date}にイベントを開催いたします。
以下の情報をご確認ください。

【開催情報】
- 日時: {event_date} [開始時間]
- 場所: [会場名]
- 住所: [住所]
- アクセス: [アクセス方法]

【当日の持ち物】
- [持ち物1]
- [持ち物2]

【ご注意事項】
- 会場への到着は開始時刻の15分前を推奨
- キャンセルの場合は[連絡先]までご連絡ください

皆様にお会いできることを楽しみにしております。

[主催者名]"""

_RECEPTION = """【受付フロー】

1. 来場者の到着
   → スタッフ: 「いらっしゃいませ。{event_title}へのご参加ありがとうございます。」

2. 名札の確認・配布
   → スタッフ: 「お名前を教えていただけますか？」
   → 名簿で確認後、名札を渡す

3. 参加費の確認（有料の場合）
   → スタッフ: 「参加費はお支払い済みでしょうか？」

4. 会場への案内
   → スタッフ: 「会場はこちらになります。名札をお付けください。」
   → 会場入口を指し示す

【よくある質問への対応】

Q: 名札が見つかりません
A: 「お名前を確認いたしますので、少しお待ちください。」→ 名簿で確認

Q: 参加費はどこで支払いますか？
A: 「受付でお支払いいただけます。現金またはクレジットカードがご利用いただけます。」

Q: 会場はどこですか？
A: 「[会場名]の[フロア名]になります。こちらから[方向]にお進みください。」"""

_SURVEY = """件名: {event_title} アンケートのお願い

アンケートのお願い

[参加者名] 様

{event_title}にご参加いただき、ありがとうございました。

より良いイベント運営のため、アンケートにご協力いただけますと幸いです。
所要時間は約3分です。

【アンケートURL】
[URLを記載]

【アンケート内容】
1. 今回のイベントの満足度
2. 良かった点
3. 改善してほしい点
4. 次回も参加したいか
5. その他ご意見・ご要望

ご協力のほど、よろしくお願いいたします。

[主催者名]"""

_GENERIC = """{task_name}に関する参考資料

【概要】
{task_name}について、以下の点を確認・準備してください。

【チェックリスト】
- [ ] 必要な資料・情報の準備
- [ ] 担当者の決定
- [ ] スケジュールの確認
- [ ] 関係者への連絡"""


@dataclass(frozen=True, slots=True)
class CannedAdvisory:
    template: str
    checklist: tuple[str, ...]
    notes: tuple[str, ...]
    additional_items: tuple[str, ...]

    def render(self, **context: str) -> TaskDetail:
        return TaskDetail(
            template=self.template.format(**context),
            checklist=list(self.checklist),
            notes=list(self.notes),
            additional_items=list(self.additional_items),
        )


# Checked in declaration order; first key that matches wins.
CANNED_ADVISORIES: dict[str, CannedAdvisory] = {
    "メール文案作成": CannedAdvisory(
        template=_EMAIL_DRAFT,
        checklist=(
            "件名にビジネス価値を明記しているか",
            "宛先の役職・会社名が正しいか",
            "具体的なビジネス成果を記載しているか",
            "イベントの日時・場所が正確か",
            "参加方法が分かりやすいか",
            "締切日を明記しているか",
            "問い合わせ先が明記されているか",
        ),
        notes=(
            "B2Bは意思決定に時間がかかるため、イベントの2-3週間前までに送信",
            "冒頭でビジネス価値を明確に訴求",
            "ROI、効率化、コスト削減などの具体的な成果を記載",
            "データや成功事例を活用すると効果的",
            "返信期限を明確に設定",
            "会社名・役職などの必須情報を記載",
        ),
        additional_items=(
            "業種・役職別のカスタマイズ案",
            "リマインドメールの送信スケジュール",
            "参加確定メールの送信",
            "キャンセル待ちリストの管理",
            "フォローアップメールの計画",
        ),
    ),
    "招待状送付（メール）": CannedAdvisory(
        template=_INVITATION,
        checklist=(
            "宛先の会社名・部署名・役職名が正確か",
            "ビジネス価値を明確に記載しているか",
            "日時・場所が正確か",
            "参加方法が明確か",
            "返信期限を明記しているか",
        ),
        notes=(
            "B2Bでは個人名・役職名を正確に記載",
            "会社名・部署名まで記載することで信頼性が向上",
            "ビジネス価値（ROI、成果）を冒頭で明示",
            "返信期限は開催日の1-2週間前を推奨",
            "特別感を演出（限定、特別価格など）",
        ),
        additional_items=(
            "業種別のカスタマイズ案",
            "招待状のデザイン",
            "メール以外の送付方法の検討",
            "フォローアップのタイミング",
        ),
    ),
    "リマインド通知配信（参加確定者向け）": CannedAdvisory(
        template=_REMINDER,
        checklist=(
            "会場情報が正確か",
            "アクセス方法が分かりやすいか",
            "開始時刻を明記しているか",
            "連絡先が記載されているか",
        ),
        notes=(
            "イベント前日または2日前に送信",
            "会場情報は詳細に記載",
            "アクセス方法は複数の手段を記載",
            "キャンセル連絡先も明記",
        ),
        additional_items=(
            "当日の天気情報",
            "駐車場情報",
            "最寄り駅からの案内図",
        ),
    ),
    "受付フロー設計＆台本作成": CannedAdvisory(
        template=_RECEPTION,
        checklist=(
            "受付担当者の役割分担が明確か",
            "名札・名簿の準備",
            "参加費の支払い方法の確認",
            "会場への案内方法の決定",
            "よくある質問への対応方法",
        ),
        notes=(
            "受付は開始時刻の30分前から開始",
            "複数の受付カウンターを準備（来場者が多い場合）",
            "名札は事前に準備しておく",
            "混雑時の対応も想定する",
        ),
        additional_items=(
            "受付担当者のシフト表",
            "名札のデザイン",
            "受付カウンターのレイアウト",
            "キャンセル待ちの対応",
        ),
    ),
    "参加者アンケート配信": CannedAdvisory(
        template=_SURVEY,
        checklist=(
            "アンケートの質問項目が明確か",
            "所要時間が明記されているか",
            "回答期限を設定しているか",
            "謝辞が含まれているか",
        ),
        notes=(
            "イベント終了後、なるべく早く送信（24時間以内推奨）",
            "質問は5-10問程度に絞る",
            "選択肢と自由記述を組み合わせる",
            "回答期限は1週間後を推奨",
        ),
        additional_items=(
            "謝礼や特典の検討",
            "アンケート結果の集計方法",
            "改善点の反映計画",
        ),
    ),
}

GENERIC_ADVISORY = CannedAdvisory(
    template=_GENERIC,
    checklist=(
        "必要な資料・情報の準備",
        "担当者の決定",
        "スケジュールの確認",
    ),
    notes=(
        "事前に十分な準備時間を確保する",
        "関係者とコミュニケーションを密に取る",
    ),
    additional_items=("追加で検討すべき項目があれば記載",),
)


def find_canned_advisory(task_name: str) -> CannedAdvisory | None:
    if not task_name:
        return None
    for key, advisory in CANNED_ADVISORIES.items():
        if key in task_name or task_name in key:
            return advisory
    return None


def fallback_detail(
    task_name: str | None,
    event_title: str | None = None,
    event_date: str | None = None,
) -> TaskDetail:
    name = task_name or ""
    advisory = find_canned_advisory(name) or GENERIC_ADVISORY
    return advisory.render(
        task_name=name,
        event_title=event_title or "",
        event_date=event_date or "",
    )
