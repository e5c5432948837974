#!/usr/bin/env python3
"""
AI Writer メインスクリプト
"""
import sys
import json
import argparse
from pathlib import Path
from dotenv import load_dotenv

# .envファイルから環境変数を読み込み
load_dotenv()

# プロジェクトルートをPythonパスに追加
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from ai_writer.core.plugin import AIWriterPlugin
from ai_writer.config.config_manager import ConfigManager
from ai_writer.services.exceptions import AIWriterError, ConfigurationError
from ai_writer.utils.constants import Constants, DefaultValues
from ai_writer.utils.utils import setup_logging


def parse_arguments(argv=None):
    """コマンドライン引数を解析"""
    parser = argparse.ArgumentParser(
        description='AI Writer - AIによるWordPressコンテンツ生成',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用例:
  python main.py --activate                                  # テーブルと初期設定を作成
  python main.py --test-connection                           # APIキーの接続テスト
  python main.py --generate "WordPress Development" --save   # 生成して保存
  python main.py --generate "SEO Basics" --create-post --post-status draft
  python main.py --set max_tokens=2000 --show-settings
  python main.py --list-saved 5                              # 保存済みコンテンツの一覧
  python main.py --generate "SEO Basics" --save --content-id 3  # 保存済みID 3 を上書き
        """
    )

    parser.add_argument('--test-connection', action='store_true', help='OpenAI API と WordPress REST API への接続テスト')
    parser.add_argument('--generate', metavar='TOPIC', help='指定トピックでコンテンツを生成')
    parser.add_argument('--content-type', default=DefaultValues.CONTENT_TYPE,
                        help=f'コンテンツタイプ ({", ".join(DefaultValues.CONTENT_TYPES)})')
    parser.add_argument('--length', default=DefaultValues.LENGTH,
                        help=f'長さ ({", ".join(DefaultValues.LENGTHS)})')
    parser.add_argument('--tone', help=f'トーン ({", ".join(DefaultValues.TONES)}、未指定時は設定値)')
    parser.add_argument('--save', action='store_true', help='生成結果をコンテンツテーブルに保存')
    parser.add_argument('--create-post', action='store_true', help='生成結果からWordPress投稿を作成')
    parser.add_argument('--post-status', default=DefaultValues.POST_STATUS,
                        help=f'投稿ステータス ({", ".join(Constants.ALLOWED_POST_STATUSES)})')
    parser.add_argument('--content-id', type=int, metavar='ID', help='--save 時に上書きする保存済みコンテンツのID')
    parser.add_argument('--list-saved', nargs='?', type=int, const=20, metavar='LIMIT',
                        help='保存済みコンテンツを新しい順に一覧表示（既定20件）')
    parser.add_argument('--show-saved', type=int, metavar='ID', help='保存済みコンテンツを表示')
    parser.add_argument('--delete-saved', type=int, metavar='ID', help='保存済みコンテンツを削除')
    parser.add_argument('--show-config', action='store_true', help='環境設定を表示（機密情報はマスク）')
    parser.add_argument('--show-settings', action='store_true', help='現在の設定を表示（機密情報はマスク）')
    parser.add_argument('--set', action='append', default=[], metavar='KEY=VALUE', help='設定値を保存（複数指定可）')
    parser.add_argument('--activate', action='store_true', help='コンテンツテーブルとデフォルト設定を作成')
    parser.add_argument('--verbose', '-v', action='store_true', help='詳細ログを出力')

    return parser.parse_args(argv)


def print_response(label: str, response: dict):
    """アクションの応答をJSONで表示"""
    print(f"[{label}]")
    print(json.dumps(response, ensure_ascii=False, indent=2))


def parse_setting(item: str) -> tuple:
    """KEY=VALUE 形式を分解"""
    if '=' not in item:
        raise ConfigurationError(f"Invalid setting '{item}', expected KEY=VALUE")
    key, value = item.split('=', 1)
    return key.strip(), value.strip()


def run(args, plugin: AIWriterPlugin) -> bool:
    """指定された処理を順に実行し、すべて成功した場合Trueを返す"""
    success = True

    if args.activate:
        plugin.activate()
        print("✅ AI Writer をアクティベートしました")

    if args.set:
        plugin.settings_store.update(dict(parse_setting(item) for item in args.set))
        print(f"✅ 設定を保存しました: {', '.join(parse_setting(item)[0] for item in args.set)}")

    if args.show_config:
        print_response('config', plugin.config.get_config_summary())

    if args.show_settings:
        print_response('settings', plugin.settings_store.get_settings_summary())

    if args.test_connection:
        response = plugin.handle_action(Constants.ACTION_TEST_CONNECTION, {})
        print_response('test-connection', response)
        success = success and response['success']

        wordpress_ok = plugin.wordpress_api.test_connection()
        print(f"{'✅' if wordpress_ok else '❌'} WordPress REST API: {plugin.wordpress_api.site_url}")
        success = success and wordpress_ok

    success = run_saved_content_commands(args, plugin) and success

    if args.generate:
        form = {
            'topic': args.generate,
            'content_type': args.content_type,
            'length': args.length,
            'tone': args.tone or '',
        }
        response = plugin.handle_action(Constants.ACTION_GENERATE_CONTENT, form)
        print_response('generate-content', response)
        if not response['success']:
            return False

        generated = response['data']
        if args.save:
            save_form = {
                'title': generated['title'],
                'content': generated['content'],
            }
            if args.content_id is not None:
                save_form['content_id'] = args.content_id
            saved = plugin.handle_action(Constants.ACTION_SAVE_CONTENT, save_form)
            print_response('save-content', saved)
            success = success and saved['success']

        if args.create_post:
            created = plugin.handle_action(Constants.ACTION_CREATE_POST, {
                'title': generated['title'],
                'content': generated['content'],
                'status': args.post_status,
            })
            print_response('create-post', created)
            success = success and created['success']

    elif args.save or args.create_post:
        print("--save / --create-post には --generate が必要です", file=sys.stderr)
        return False

    return success


def run_saved_content_commands(args, plugin: AIWriterPlugin) -> bool:
    """保存済みコンテンツの一覧・表示・削除"""
    success = True
    store = plugin.content_store

    if args.list_saved is not None:
        items = [
            {key: row[key] for key in ('id', 'title', 'created_at', 'updated_at')}
            for row in store.list_contents(limit=args.list_saved)
        ]
        print_response('saved-contents', {'total': store.count(), 'items': items})

    if args.show_saved is not None:
        saved = store.get_content(args.show_saved)
        if saved is None:
            print(f"❌ 保存済みコンテンツが見つかりません: ID {args.show_saved}", file=sys.stderr)
            success = False
        else:
            print_response('saved-content', saved)

    if args.delete_saved is not None:
        if store.delete_content(args.delete_saved):
            print(f"✅ 保存済みコンテンツを削除しました: ID {args.delete_saved}")
        else:
            print(f"❌ 保存済みコンテンツが見つかりません: ID {args.delete_saved}", file=sys.stderr)
            success = False

    return success


def main():
    """メイン処理"""
    try:
        # コマンドライン引数の解析
        args = parse_arguments()

        config = ConfigManager(env_file=None)
        setup_logging('DEBUG' if args.verbose else config.system.log_level, config.system.log_dir)

        with AIWriterPlugin(config) as plugin:
            success = run(args, plugin)

        sys.exit(0 if success else 1)

    except ConfigurationError as e:
        print(f"設定エラー: {e}", file=sys.stderr)
        sys.exit(1)
    except AIWriterError as e:
        print(f"システムエラー: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n処理が中断されました", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        print(f"予期しないエラー: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
