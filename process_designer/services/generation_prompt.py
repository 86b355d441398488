"""Prompt that asks an AI assistant to turn a business manual into process markdown.

Users paste the prompt together with their manual into the assistant and copy
the answer into the import box. The rules the prompt states (contiguous P and
L numbers, one report and one system per row, ...) are exactly what
``process_validator`` checks afterwards; the parser itself does not enforce
them.
"""

from __future__ import annotations

from process_designer.services.markdown_dialect import resolve_locale

_PROMPT_EN = """\
You are an assistant that converts a business manual into structured text that a
downstream web application can draw as a flowchart.
Follow the requirements, conversion rules and checks below, and output **only**
the specified format inside a single copyable snippet.

--------------------------------
# Output rules (most important)
- Write the output **inside exactly one code block**.
- **No citations, references, URLs, notes or explanations.**
- The section order is fixed:
  `# BusinessProcessName` -> `## Description` -> `## Dept` -> `## Process` -> `## Reports` -> `## Systems`
- **L is the row number (vertical position), numbered from 1 without gaps**
- **P is the node identifier, numbered from 1**
- **The start node is always labeled "Start"** (it has exactly one Next)
- **The end node is always labeled "End"** (it has **no Next**; do not write a Next line)
- Role names listed under Dept must be used in Process spelled exactly the same
- No synonyms or spelling variants (e.g. pick one of "General Affairs" / "GA")

--------------------------------
# Layout requirements (downstream web application)
The application draws a swimlane diagram with **L (row) on the vertical axis**
and **Dept on the horizontal axis**.

### L (row number)
- Increases **1, 2, 3, ...** following the real order of work
- Branches and loops are expressed through P references; never break the L sequence

### P (process number)
- Unique identifier of a node
- Next / Yes / No **must reference an existing P number**

### Connections (Next / Yes / No)
- Start: **exactly one Next** (required)
- End: **no Next** (forbidden)
- A decision has **at most two branches, Yes and No**
- Send-backs point to the earlier P number (e.g. No: P3)

### Related systems / reports (important)
- **Per row (one L) at most one related system and at most one report**
- **If a row needs several systems or reports, split the work into several
  steps** and give each its own L
- The **#L values under Reports / Systems must exist in Process**

--------------------------------
# Conversion rules

### 1) BusinessProcessName
- Take it from the manual's title or chapter; keep it generic and short.

### 2) Description
- Summarize purpose, scope and goal in 3-4 sentences (no how-to details).

### 3) Dept (departments / roles)
- One per line. Used as swimlanes, so the spelling is fixed.
- Must match the role names used in Process exactly.

### 4) Process (most important)
- **Define the start node as #P1 #L1 (label "Start")**
- **The end node is labeled "End" and has no Next line**
- #P numbers follow order of appearance, #L numbers follow vertical order
- Step names start with a verb (e.g. Create request, Review content, Final approval)
- At most two branches (Yes / No). Abstract complex branching.

### 5) Reports / Systems (one per row)
- For each L assign **at most one report and at most one system**.
- If a row needs more, split the process and give each part its own L.
- A system or report used on several rows lists its L numbers separated by commas.

--------------------------------
# Self-check
- P and L both start at 1 and have no gaps
- Start node has a Next, end node has none
- Every Next / Yes / No target is an existing P
- Every Dept role appears in Process
- Every #L under Reports / Systems exists in Process
- No row has more than **one system and one report**
- No extra explanations, footnotes or URLs

--------------------------------
# Output format (use this structure as is)
# BusinessProcessName
{business process name}

## Description
{3-4 sentence summary}

## Dept
{role 1}
{role 2}
{role 3}
...

## Process
#P{number} #L{row} {role} Start
Next: P{number}

#P{number} #L{row} {role} {step name}
Next: P{number}

#P{number} #L{row} {role} {decision step name}
Yes: P{number}
No: P{number}

#P{number} #L{row} {role} End

(P/L continue without gaps until the end)

## Reports
{report name} #L: {row}, {row}, ...
{report name} #L: {row}, {row}, ...
...

## Systems
{system name} #L: {row}, {row}, ...
{system name} #L: {row}, {row}, ...
..."""

_PROMPT_JA = """\
あなたは業務マニュアルを、後続の Web アプリがフローチャートとして正しく描画できる構造化テキストに変換する専門アシスタントです。
以下の要件・変換規則・検証ルールに従い、指定フォーマット **のみ** コピペ可能なスニペット内に出力してください。

────────────────────────────────
# 出力仕様（最重要）
- 出力は **必ず 1 つのコードブロック内のみ** に記述。
- **引用元情報・参考文献・URL・注釈・説明文は禁止。**
- セクション順序は固定：
  `# BusinessProcessName` → `## Description` → `## Dept` → `## Process` → `## Reports` → `## Systems`
- **L は行番号（縦位置）として 1 からの連番**、欠番禁止
- **P はノード識別子として 1 からの連番**
- **開始ノードは必ず「開始」**（Next を 1 本だけ記述）
- **終了ノードは必ず「終了」**（**Next を持たない**。Next 行を記述しない）
- Dept に書いたロール名は Process で必ず同一表記で使用
- 同義語・表記揺れは禁止（例：総務部／総務 はどちらかに統一）

────────────────────────────────
# ビジュアライズ要件（後続 Web アプリ準拠）
後続 Web アプリは、**縦軸に L（行番号）**、**横軸に Dept（部門）** を割り当てて Swimlane 図を描画します。

### ▪ L（行番号）
- 実業務の時系列に沿って **1, 2, 3, …** と増加
- 分岐・戻りは P の参照で表し、L の通番は崩さない

### ▪ P（プロセス番号）
- ノードのユニーク識別子
- Next / Yes / No は **必ず有効な P 番号** を参照

### ▪ 接続（Next / Yes / No）
- 開始：**Next を 1 本**（必須）
- 終了：**Next を記述しない**（禁止）
- 判断分岐は **Yes / No の最大 2 系統**
- 差戻しは該当 P 番号へ戻す（例：No: P3）

### ▪ 関連システム / 帳票（重要）
- **1 行（1 つの L）につき、関連システムは上限 1、帳票も上限 1**
- **1 行に複数の関連システムや複数の帳票を紐づけたい場合は、その業務を複数のプロセスに分解** し、それぞれ固有の L（行）に割り当てる
- Reports / Systems に記す **#L は必ず Process に存在する L** を参照

────────────────────────────────
# 変換ルール

### 1) BusinessProcessName
- マニュアルの題名・章名から抽出し、汎用的で簡潔に命名。

### 2) Description
- 目的・範囲・ゴールを 3〜4 文で要約（How-to 詳細は含めない）。

### 3) Dept（部門・ロール）
- 1 行 1 要素で列挙。Swimlane に使われるため表記は固定。
- Process で用いる担当ロール表記と完全一致させる。

### 4) Process（最重要）
- **#P1 #L1 から開始ノードを定義（ラベルは「開始」）**
- **終了ノードはラベル「終了」、Next 行は記述しない**
- #P は出現順の連番、#L はフローの縦配置順の連番
- ステップ名は動詞始まり（例：申請書作成、内容確認、最終承認）
- 分岐は Yes / No の 2 系統まで。複雑分岐は抽象化。

### 5) Reports / Systems（1 行 1 対応の原則）
- 各 L に対し、**帳票は最大 1、システムは最大 1** のみを割り当てる。
- 1 行で複数を必要とする場合、Process を分割して別 L を割り当てる（例：同一担当・同一時点でも「登録」「送信」を分離）。
- 関連システム、帳票を複数の行に割当する場合、カンマ区切りでL番号を記載する。
────────────────────────────────
# 整合性チェック（自己検証）
- P と L はともに 1 からの連番・欠番なし
- 開始ノード：Next あり／終了ノード：Next なし
- Next / Yes / No の参照先はすべて存在する P
- Dept のロールは Process に必ず登場
- Reports / Systems の #L は必ず Process の L に存在
- 各 L で **関連システムは 1、帳票も 1** を超えない
- 余計な説明文・脚注・ URL が混入していない

────────────────────────────────
# 出力フォーマット（この構造をそのまま使用）
# BusinessProcessName
{業務プロセス名}

## Description
{3〜4 文の業務要約}

## Dept
{ロール1}
{ロール2}
{ロール3}
…

## Process
#P{番号} #L{行番号} {ロール} 開始
Next: P{番号}

#P{番号} #L{行番号} {ロール} {ステップ名}
Next: P{番号}

#P{番号} #L{行番号} {ロール} {判断ステップ名}
Yes: P{番号}
No: P{番号}

#P{番号} #L{行番号} {ロール} 終了

（P/L が終了まで連番で続く）

## Reports
{帳票名} #L: {対応行番号}, {対応行番号}, ...
{帳票名} #L: {対応行番号}, {対応行番号}, ...
…

## Systems
{システム名} #L: {対応行番号}, {対応行番号}, ...
{システム名} #L: {対応行番号}, {対応行番号}, ...
…"""

_PROMPTS = {"en": _PROMPT_EN, "ja": _PROMPT_JA}

# Purchase request approval: 12 steps over 11 rows (P5 and P6 share L5),
# three decisions with a send-back loop.
SAMPLE_MARKDOWN = """\
# BusinessProcessName
購買申請承認プロセス

## Description
従業員が物品やサービスを購入する際の申請から承認、発注、検収までの一連の業務フロー

## Dept
申請者
総務部
購買担当
経理部
承認者

## Process
#P1 #L1 申請者 開始
Next: P2

#P2 #L2 申請者 購買申請書作成
Next: P3

#P3 #L3 総務部 申請内容確認
Yes: P4
No: P2

#P4 #L4 経理部 予算確認
Yes: P5
No: P6

#P5 #L5 承認者 一次承認
Next: P7

#P6 #L5 申請者 申請内容修正
Next: P3

#P7 #L6 経理部 金額判定
Yes: P8
No: P9

#P8 #L7 承認者 最終承認
Next: P9

#P9 #L8 購買担当 発注処理
Next: P10

#P10 #L9 購買担当 納品確認
Next: P11

#P11 #L10 経理部 検収完了
Next: P12

#P12 #L11 経理部 完了

## Reports
購買申請書 #L: 2
予算確認書 #L: 4
承認記録 #L: 5, 7
発注書 #L: 8
検収書 #L: 10
納品書 #L: 9

## Systems
購買管理システム #L: 2, 8, 9, 10
予算管理システム #L: 4
承認ワークフロー #L: 5, 7
"""


def get_generation_prompt(locale: str | None = None) -> str:
    """Prompt text in ``locale`` ("en" / "ja"), default ``settings.MARKDOWN_LOCALE``."""
    return _PROMPTS[resolve_locale(locale)]
