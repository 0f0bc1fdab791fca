#!/usr/bin/env python3
"""
监控循环演示

在本地启动一个模拟提供商接口，展示：
1. 按目标并发探测并逐条收到结果
2. 不同结果分类（成功、限流、密钥无效、缺少密钥）
3. 结果看板的统计和最佳模型
4. 停止后不再写入结果
"""

import asyncio
import random
import sys
from pathlib import Path

from aiohttp import web

sys.path.insert(0, str(Path(__file__).parent.parent))

from modelsfree.models.ping import Target
from modelsfree.services.metrics import get_avg, get_uptime, get_verdict
from modelsfree.services.monitor_loop import MonitorLoop
from modelsfree.services.result_board import ResultBoard
from modelsfree.utils.log_manager import configure_logging


async def fake_chat_completions(request: web.Request) -> web.Response:
    """按模型名返回不同结果的模拟接口"""
    body = await request.json()
    model = body.get('model')

    if request.headers.get('Authorization') != 'Bearer demo-key':
        return web.json_response({'error': {'message': 'invalid key'}}, status=401)
    if model == 'busy-model':
        return web.json_response({'error': {'message': 'too many requests'}}, status=429)

    await asyncio.sleep(random.uniform(0.05, 0.3))
    return web.json_response({'choices': [{'message': {'content': 'pong'}}]})


async def demo_monitor_loop():
    print("🚀 modelsfree 监控循环演示")
    print("=" * 50)

    configure_logging({'log_level': 'WARNING'})

    app = web.Application()
    app.router.add_post('/v1/chat/completions', fake_chat_completions)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, '127.0.0.1', 0)
    await site.start()
    port = site._server.sockets[0].getsockname()[1]
    endpoint = f'http://127.0.0.1:{port}/v1/chat/completions'

    targets = [
        Target('groq', 'fast-model', endpoint, credential='demo-key'),
        Target('groq', 'busy-model', endpoint, credential='demo-key'),
        Target('cerebras', 'fast-model', endpoint, credential='wrong-key'),
        Target('sambanova', 'fast-model', endpoint, credential=None),
    ]

    board = ResultBoard(models=[])
    loop = MonitorLoop(lambda: targets, interval=1, probe_timeout=5)
    board.attach(loop)

    def print_snapshot(snapshot):
        outcome = snapshot.outcome
        text = f"{outcome.latency_ms}ms" if outcome.is_success else outcome.message
        print(f"   📡 {snapshot.key}: {text}")

    loop.subscribe(print_snapshot)

    try:
        print("\n1. 启动监控循环（间隔1秒），运行3秒")
        await loop.start()
        await asyncio.sleep(3.2)

        print("\n2. 停止监控循环")
        await loop.stop()
        print(f"   已完成 {loop.cycle_count} 轮探测")

        print("\n3. 结果看板")
        for result in board.get_results():
            avg = get_avg(result)
            avg_text = '-' if avg == float('inf') else f"{avg}ms"
            print(f"   {result.key:<24} 平均 {avg_text:<8} 可用率 {get_uptime(result):>3}%  "
                  f"{get_verdict(result).value}")

        best = board.best()
        if best is not None:
            print(f"\n🏆 最佳模型: {best.key}")

    finally:
        await loop.stop()
        await runner.cleanup()

    print("\n✅ 演示完成")


if __name__ == "__main__":
    asyncio.run(demo_monitor_loop())
