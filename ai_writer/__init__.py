"""
AI Writer - AI生成コンテンツからWordPress投稿を作成するシステム

ディレクトリ構造:
- api/: 外部API関連 (OpenAI互換API, WordPress)
- core/: コアビジネスロジック (プロンプト生成, レスポンス解析, ブロック変換, アクション処理)
- database/: 生成コンテンツの保存
- services/: システムサービス (エラーハンドリング, セキュリティ, リソース管理)
- security/: 入力検証・サニタイゼーション
- utils/: ユーティリティ関数と定数
- config/: 設定管理
"""

__version__ = '1.0.0'
