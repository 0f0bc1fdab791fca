#!/usr/bin/env python3
"""
modelsfree 主程序入口

列出各提供商的免费编程模型，保存API密钥，并按固定间隔探测模型的延迟和可用性。
"""

import argparse
import asyncio
import json
import logging
import os
import signal
import sys
from typing import Optional, Dict, Any, List

from modelsfree.catalogue import (
    ModelFilter, calculate_stats, filter_models, get_model, get_models,
    get_provider, get_provider_keys, is_valid_tier_filter, sort_models
)
from modelsfree.catalogue.filters import SORT_FIELDS
from modelsfree.models.ping import ModelStatus, ProbeStatus, StatusSnapshot
from modelsfree.services.config_manager import ConfigManager
from modelsfree.services.config_watcher import ConfigWatcher
from modelsfree.services.key_store import KeyStore
from modelsfree.services.metrics import get_avg, get_uptime, get_verdict
from modelsfree.services.monitor_loop import MonitorLoop
from modelsfree.services.opencode import generate_opencode_config, generate_opencode_instructions
from modelsfree.services.result_board import ResultBoard
from modelsfree.services.status_store import StatusStore
from modelsfree.services.target_builder import TargetProvider
from modelsfree.utils.exceptions import ModelsFreeError, ConfigError
from modelsfree.utils.log_manager import log_manager, get_logger

# 版本信息
__version__ = "1.0.0"

STATUS_ICONS = {
    ProbeStatus.SUCCESS: '✅',
    ProbeStatus.HTTP_ERROR: '❌',
    ProbeStatus.TIMEOUT: '⏱️',
    ProbeStatus.NETWORK_ERROR: '❌',
    ProbeStatus.MISSING_CREDENTIAL: '⚪',
}


class ModelsFreeApp:
    """modelsfree 主应用程序类"""

    def __init__(self, config_path: Optional[str] = None,
                 overrides: Optional[Dict[str, Any]] = None):
        """初始化应用程序

        Args:
            config_path: 配置文件路径，为空时使用默认配置
            overrides: 命令行覆盖项（log_level、log_file、key_file、filters、mode）
        """
        self.config_path = config_path
        self.overrides = overrides or {}
        self.logger: Optional[logging.Logger] = None
        self.is_running = False
        self.shutdown_event = asyncio.Event()

        # 核心组件
        self.config_manager: Optional[ConfigManager] = None
        self.config_watcher: Optional[ConfigWatcher] = None
        self.key_store: Optional[KeyStore] = None
        self.target_provider: Optional[TargetProvider] = None
        self.status_store: Optional[StatusStore] = None
        self.monitor_loop: Optional[MonitorLoop] = None
        self.result_board: Optional[ResultBoard] = None

    async def initialize(self):
        """初始化应用程序组件"""
        try:
            self.config_manager = ConfigManager(self.config_path)
            self.config_manager.load_config()
            global_config = self._global_config()

            self._configure_logging(global_config)
            self.logger = get_logger('main')
            self.logger.info("开始初始化 modelsfree")

            self.key_store = KeyStore(
                key_file=global_config.get('key_file'),
                config_keys=self.config_manager.get_api_keys()
            )

            self.target_provider = TargetProvider(
                self.key_store,
                model_filter=self._model_filter(),
                mode=self.overrides.get('mode') or self.config_manager.get_mode()
            )

            self.status_store = StatusStore()
            self.monitor_loop = MonitorLoop(
                self.target_provider,
                status_store=self.status_store,
                interval=global_config['check_interval'],
                probe_timeout=global_config['probe_timeout']
            )

            self.result_board = ResultBoard()
            self.result_board.attach(self.monitor_loop)
            self.monitor_loop.subscribe(self._on_snapshot)

            if self.config_path:
                self.config_watcher = ConfigWatcher(self.config_manager,
                                                    loop=asyncio.get_running_loop())
                self.config_watcher.add_change_callback(self._on_config_changed_callback)

            self.logger.info("应用程序组件初始化完成")

        except Exception as e:
            if self.logger:
                self.logger.error(f"应用程序初始化失败: {e}", exc_info=True)
            else:
                print(f"应用程序初始化失败: {e}", file=sys.stderr)
            raise

    def _global_config(self) -> Dict[str, Any]:
        global_config = self.config_manager.get_global_config()
        for key in ('log_level', 'log_file', 'key_file'):
            if self.overrides.get(key):
                global_config[key] = self.overrides[key]
        return global_config

    def _model_filter(self) -> ModelFilter:
        """配置文件中的过滤条件，命令行参数优先"""
        model_filter = self.config_manager.get_model_filter()
        for field_name, value in (self.overrides.get('filters') or {}).items():
            if value is not None:
                setattr(model_filter, field_name, value)
        return model_filter

    def _configure_logging(self, global_config: Dict[str, Any]):
        log_config = {
            'log_level': global_config.get('log_level', 'INFO'),
            'enable_console': True,
            'enable_file': bool(global_config.get('log_file')),
        }

        if global_config.get('log_file'):
            log_config['log_file'] = global_config['log_file']
            log_config['max_file_size'] = global_config.get('max_log_size', 10 * 1024 * 1024)
            log_config['backup_count'] = global_config.get('log_backup_count', 5)

        log_manager.configure(log_config)

    def _on_snapshot(self, snapshot: StatusSnapshot):
        """每个目标探测完成时输出一行结果"""
        outcome = snapshot.outcome
        if outcome.is_success:
            self.logger.info(f"{snapshot.key}: {outcome.latency_ms}ms")
        else:
            detail = f" - {outcome.detail}" if outcome.detail else ""
            self.logger.info(f"{snapshot.key}: {outcome.message}{detail}")

    def _on_config_changed_callback(self, old_config: Dict[str, Any],
                                    new_config: Dict[str, Any]):
        """配置文件变更回调，新设置从下一轮探测开始生效"""
        try:
            self.logger.info("检测到配置文件变更，应用新配置")

            global_config = self._global_config()
            self._configure_logging(global_config)

            self.key_store.set_config_keys(self.config_manager.get_api_keys())
            self.target_provider.update_filter(
                self._model_filter(),
                mode=self.overrides.get('mode') or self.config_manager.get_mode()
            )
            if global_config['check_interval'] != self.monitor_loop.interval:
                self.monitor_loop.update_interval(global_config['check_interval'])
            self.monitor_loop.probe_timeout = global_config['probe_timeout']

            self.logger.info("配置重新加载完成")

        except (ModelsFreeError, ValueError) as e:
            self.logger.error(f"应用新配置失败: {e}", exc_info=True)

    async def start(self):
        """启动应用程序，直到收到关闭信号"""
        if self.is_running:
            self.logger.warning("应用程序已经在运行")
            return

        try:
            self.is_running = True
            self.logger.info("启动 modelsfree 监控")

            if self.config_watcher:
                self.config_watcher.start_watching()

            await self.monitor_loop.start()
            self.logger.info("modelsfree 监控启动完成")

            await self.shutdown_event.wait()

        except Exception as e:
            self.logger.error(f"应用程序运行异常: {e}", exc_info=True)
            raise
        finally:
            await self.stop()

    async def stop(self):
        """停止应用程序"""
        if not self.is_running:
            return

        self.logger.info("正在停止 modelsfree...")
        self.is_running = False

        if self.monitor_loop:
            await self.monitor_loop.stop()

        if self.config_watcher:
            self.config_watcher.stop_watching()

        self.logger.info("modelsfree 已停止")
        log_manager.cleanup()

    def shutdown(self):
        """触发应用程序关闭"""
        if self.logger:
            self.logger.info("收到关闭信号")
        self.shutdown_event.set()

    def get_status(self) -> Dict[str, Any]:
        status = {
            'is_running': self.is_running,
            'config_path': self.config_path,
        }

        if self.monitor_loop:
            status['monitor_stats'] = self.monitor_loop.get_stats()

        if self.target_provider:
            status['mode'] = self.target_provider.mode
            status['filter'] = self.target_provider.model_filter.to_dict()

        if self.key_store:
            status['keys'] = self.key_store.get_summary()

        return status


# 全局应用程序实例
app: Optional[ModelsFreeApp] = None


def signal_handler(signum, frame=None):
    """信号处理器"""
    signal_name = signal.Signals(signum).name
    print(f"\n收到信号 {signal_name} ({signum})")

    if app:
        app.shutdown()
    else:
        print("应用程序未初始化，直接退出")
        sys.exit(0)


def install_signal_handlers():
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, signal_handler, signum)
        except NotImplementedError:
            # Windows 事件循环不支持 add_signal_handler
            signal.signal(signum, signal_handler)


def create_argument_parser() -> argparse.ArgumentParser:
    """创建命令行参数解析器"""
    parser = argparse.ArgumentParser(
        prog='modelsfree',
        description='modelsfree - 免费编程大模型目录与延迟监控',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例用法:
  %(prog)s                                  # 使用默认配置持续监控全部模型
  %(prog)s config.yaml                      # 使用指定配置文件启动监控
  %(prog)s --validate config.yaml           # 验证配置文件格式
  %(prog)s --check-once --provider groq     # 探测一轮后退出
  %(prog)s --best --tier S                  # 探测一轮并给出最佳模型
  %(prog)s --list-models --sort swe         # 列出模型目录
  %(prog)s --set-key groq gsk_xxx           # 保存API密钥
  %(prog)s --opencode groq:llama-3.3-70b-versatile

支持的提供商:
  nvidia, groq, cerebras, sambanova, openrouter,
  codestral, googleai, mistral, fireworks, hyperbolic

配置文件格式请参考 config/example.yaml
        """
    )

    parser.add_argument(
        'config_file',
        nargs='?',
        help='YAML配置文件路径'
    )

    parser.add_argument(
        '--version', '-v',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--validate',
        action='store_true',
        help='验证配置文件格式并退出'
    )

    parser.add_argument(
        '--check-once',
        action='store_true',
        help='探测一轮后退出'
    )

    parser.add_argument(
        '--best',
        action='store_true',
        help='探测一轮后输出最佳模型'
    )

    parser.add_argument(
        '--list-models',
        action='store_true',
        help='列出模型目录并退出'
    )

    parser.add_argument(
        '--provider',
        choices=get_provider_keys(),
        help='只包含指定提供商的模型'
    )

    parser.add_argument(
        '--tier',
        help='按等级过滤，可以是具体等级（A+）或等级字母（A）'
    )

    parser.add_argument(
        '--search',
        help='按模型ID或名称搜索'
    )

    parser.add_argument(
        '--mode',
        choices=['models', 'providers'],
        help='探测模式（覆盖配置文件设置）'
    )

    parser.add_argument(
        '--sort',
        choices=SORT_FIELDS,
        default='tier',
        help='--list-models 的排序字段'
    )

    parser.add_argument(
        '--desc',
        action='store_true',
        help='反向排序'
    )

    parser.add_argument(
        '--set-key',
        nargs=2,
        metavar=('PROVIDER', 'KEY'),
        help='保存提供商的API密钥'
    )

    parser.add_argument(
        '--key-file',
        help='API密钥文件路径（覆盖配置文件设置）'
    )

    parser.add_argument(
        '--opencode',
        metavar='PROVIDER:MODEL',
        help='输出在 OpenCode CLI 中使用该模型的配置'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='设置日志级别（覆盖配置文件设置）'
    )

    parser.add_argument(
        '--log-file',
        help='日志文件路径（覆盖配置文件设置）'
    )

    return parser


def build_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """把命令行参数转换为应用程序覆盖项"""
    return {
        'log_level': args.log_level,
        'log_file': args.log_file,
        'key_file': args.key_file,
        'mode': args.mode,
        'filters': {'provider': args.provider, 'tier': args.tier, 'search': args.search},
    }


def validate_config_file(config_path: str) -> bool:
    """验证配置文件

    Args:
        config_path: 配置文件路径

    Returns:
        验证是否成功
    """
    try:
        print(f"正在验证配置文件: {config_path}")

        if not os.path.exists(config_path):
            print(f"❌ 配置文件不存在: {config_path}")
            return False

        config_manager = ConfigManager(config_path)
        config_manager.load_config()

        global_config = config_manager.get_global_config()
        model_filter = config_manager.get_model_filter()
        targets = filter_models(get_models(), model_filter)

        print("✅ 配置文件验证成功!")
        print(f"   - 检查间隔: {global_config['check_interval']}秒")
        print(f"   - 探测超时: {global_config['probe_timeout']}秒")
        print(f"   - 探测模式: {config_manager.get_mode()}")
        print(f"   - 匹配模型数量: {len(targets)}")

        api_keys = config_manager.get_api_keys()
        if api_keys:
            print("   - 配置的API密钥:")
            for name in api_keys:
                print(f"     * {name}")

        return True

    except ConfigError as e:
        print(f"❌ 配置文件验证失败: {e}")
        return False


def list_models(model_filter: ModelFilter, sort_by: str = 'tier',
                descending: bool = False) -> int:
    """打印模型目录

    Returns:
        列出的模型数量
    """
    if model_filter.tier and not is_valid_tier_filter(model_filter.tier):
        print(f"❌ 无效的等级过滤条件: {model_filter.tier}")
        return 0

    models = sort_models(filter_models(get_models(), model_filter), sort_by, descending)
    stats = calculate_stats(models)

    print(f"{'TIER':<5} {'PROVIDER':<11} {'MODEL':<50} {'SWE':>6} {'CTX':>5}  LABEL")
    for model in models:
        print(f"{model.tier:<5} {model.provider_key:<11} {model.model_id:<50} "
              f"{model.swe_score:>6} {model.ctx:>5}  {model.label}")

    print(f"\n共 {stats['total_models']} 个模型，{stats['total_providers']} 个提供商，"
          f"S级 {stats['top_tier_count']} 个，平均SWE得分 {stats['avg_swe_score']}%")
    return len(models)


def set_api_key(provider_key: str, api_key: str, key_file: Optional[str] = None) -> bool:
    """保存API密钥

    Returns:
        是否保存成功
    """
    try:
        key_store = KeyStore(key_file=key_file) if key_file else KeyStore()
        key_store.set_key(provider_key, api_key)
        print(f"✅ 已保存 {provider_key} 的API密钥: {key_store.mask_key(api_key)}")
        return True
    except ModelsFreeError as e:
        print(f"❌ 保存API密钥失败: {e}")
        return False


def show_opencode(target: str, key_store: KeyStore) -> bool:
    """输出 OpenCode 配置和使用说明

    Args:
        target: PROVIDER:MODEL 形式的模型标识
        key_store: 用于查找API密钥

    Returns:
        模型是否支持 OpenCode
    """
    if ':' not in target:
        print(f"❌ 模型标识格式应为 PROVIDER:MODEL，实际为: {target}")
        return False

    provider_key, model_id = target.split(':', 1)
    provider = get_provider(provider_key)
    if provider is None:
        print(f"❌ 未知的提供商: {provider_key}")
        return False

    model = get_model(provider_key, model_id)
    model_name = model.label if model else model_id

    result = generate_opencode_instructions(provider_key, model_id, model_name)
    if not result['supported']:
        print(f"❌ {result['instructions']}")
        return False

    # 终端输出中只显示遮盖后的密钥
    api_key = key_store.get_key(provider_key)
    shown_key = key_store.mask_key(api_key) if api_key else f"${provider.env_var_name}"
    config = generate_opencode_config(provider_key, model_id, shown_key)

    print(result['instructions'])
    print("~/.opencode.json:")
    print(json.dumps(config, ensure_ascii=False, indent=2))
    return True


def print_snapshots(snapshots: List[StatusSnapshot]):
    for snapshot in snapshots:
        outcome = snapshot.outcome
        icon = STATUS_ICONS.get(outcome.status, '❓')
        if outcome.is_success:
            print(f"   {icon} {snapshot.key}: {outcome.latency_ms}ms")
        else:
            detail = f" ({outcome.detail})" if outcome.detail else ""
            print(f"   {icon} {snapshot.key}: {outcome.message}{detail}")


async def check_once(config_path: Optional[str] = None,
                     overrides: Optional[Dict[str, Any]] = None,
                     best: bool = False) -> bool:
    """执行一轮探测

    缺少API密钥的目标只显示不计入失败

    Args:
        config_path: 配置文件路径
        overrides: 命令行覆盖项
        best: 是否输出最佳模型

    Returns:
        已配置密钥的目标是否全部探测成功
    """
    try:
        print(f"正在执行探测: {config_path or '默认配置'}")

        check_app = ModelsFreeApp(config_path, overrides)
        await check_app.initialize()

        snapshots = await check_app.monitor_loop.run_once()
        results = sorted(snapshots.values(), key=lambda s: s.key)
        probed = [s for s in results if s.status is not ProbeStatus.MISSING_CREDENTIAL]

        print(f"✅ 探测完成，共 {len(results)} 个目标，{len(probed)} 个已配置API密钥:")
        print_snapshots(results)

        if best:
            best_result = check_app.result_board.best()
            if best_result is None or best_result.status is not ModelStatus.UP:
                print("❌ 没有可用的模型")
                return False
            print(f"\n🏆 最佳模型: {best_result.key} ({best_result.label}) "
                  f"平均 {get_avg(best_result)}ms, 可用率 {get_uptime(best_result)}%, "
                  f"{get_verdict(best_result).value}")
            return True

        if not probed:
            print("❌ 没有配置任何API密钥，请使用 --set-key 或设置环境变量")
            return False

        return all(s.outcome.is_success for s in probed)

    except ModelsFreeError as e:
        print(f"❌ 探测失败: {e}")
        return False


async def main(argv: Optional[List[str]] = None):
    """主函数"""
    global app

    parser = create_argument_parser()
    args = parser.parse_args(argv)
    config_path = args.config_file

    if config_path and not os.path.exists(config_path):
        print(f"配置文件不存在: {config_path}", file=sys.stderr)
        sys.exit(1)

    if args.tier and not is_valid_tier_filter(args.tier):
        print(f"无效的等级过滤条件: {args.tier}", file=sys.stderr)
        sys.exit(1)

    overrides = build_overrides(args)

    # 处理特殊模式
    if args.validate:
        if not config_path:
            parser.error("--validate 需要指定配置文件")
        success = validate_config_file(config_path)
        sys.exit(0 if success else 1)

    if args.list_models:
        list_models(ModelFilter(search=args.search, tier=args.tier, provider=args.provider),
                    args.sort, args.desc)
        sys.exit(0)

    if args.set_key or args.opencode:
        config_manager = ConfigManager(config_path)
        try:
            config_manager.load_config()
        except ConfigError as e:
            print(f"配置错误: {e}", file=sys.stderr)
            sys.exit(1)
        key_file = args.key_file or config_manager.get_global_config().get('key_file')

    if args.set_key:
        provider_key, api_key = args.set_key
        success = set_api_key(provider_key, api_key, key_file)
        sys.exit(0 if success else 1)

    if args.opencode:
        key_store = KeyStore(key_file=key_file, config_keys=config_manager.get_api_keys())
        success = show_opencode(args.opencode, key_store)
        sys.exit(0 if success else 1)

    if args.check_once or args.best:
        success = await check_once(config_path, overrides, best=args.best)
        sys.exit(0 if success else 1)

    try:
        app = ModelsFreeApp(config_path, overrides)
        await app.initialize()
        install_signal_handlers()

        print(f"modelsfree v{__version__} 已启动")
        print(f"配置文件: {config_path or '默认配置'}")
        print("按 Ctrl+C 停止程序")

        await app.start()

    except KeyboardInterrupt:
        print("\n用户中断程序")
    except ConfigError as e:
        print(f"配置错误: {e}", file=sys.stderr)
        sys.exit(1)
    except ModelsFreeError as e:
        print(f"modelsfree 错误: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        if app:
            await app.stop()


def run():
    """命令行入口"""
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())

    asyncio.run(main())


if __name__ == "__main__":
    run()
