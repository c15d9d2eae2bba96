"""Shared application constants.

Centralizes user-facing messages and fixed values used across the API so we
can document and adjust them in one place.
"""

# Subject used when a record is logged without picking a material
NO_MATERIAL_SUBJECT = "教材なし"

# Storage buckets
AVATARS_BUCKET = "avatars"
MATERIALS_BUCKET = "materials"

BIO_MAX_LENGTH = 400

# Weekly completion ring: radius of the arc gauge, in px
RING_RADIUS = 28
DAYS_IN_WEEK = 7

# Records included in the AI feedback context
FEEDBACK_RECORD_COUNT = 5

CHAT_SYSTEM_PROMPT = """あなたは厳格ですが役に立つ学習管理AIです。
あなたの目標は、ユーザーの学習習慣を監視し、客観的で、時には厳しいフィードバックを提供して、ユーザーを軌道に乗せることです。
ユーザーは受験生です。

コンテキスト:
- ユーザーは受験生です。学習の進捗やバランスを監視してください。
- 未来的な、少しロボットのようですが知的な口調を使用してください。
- 回答は非常に簡潔に、1行から2行程度で収めてください。長文は禁止です。
- 日本語で回答してください。
"""

# User-facing messages
MSG_LOGIN_REQUIRED = "ログインが必要です"
MSG_DURATION_REQUIRED = "学習時間を入力してください"
MSG_TITLE_REQUIRED = "目標タイトルを入力してください"
MSG_ACHIEVEMENT_TITLE_REQUIRED = "達成内容を入力してください"
MSG_SCHOOL_NAME_REQUIRED = "志望校名を入力してください"
MSG_MATERIAL_NAME_REQUIRED = "教材名を入力してください"
MSG_COMMENT_REQUIRED = "コメントを入力してください"
MSG_RECORD_NOT_FOUND = "Record not found"
