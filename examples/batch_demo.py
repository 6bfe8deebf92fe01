"""批量压缩客户端演示

展示批量控制器的完整流程：
- 📥 加入 public/images 中的图片
- 🚀 提交到压缩服务并实时显示上传进度
- 💾 逐个下载结果和打包下载

运行前先启动压缩服务，或通过 PIC_SERVICE_URL 指定服务地址。
"""

import asyncio
from pathlib import Path

from py_image_compress_client import BatchController
from py_image_compress_client.engine import build_settings
from py_image_compress_client.exceptions import BatchError
from py_image_compress_client.models import BatchRun, RunPhase
from py_image_compress_client.utils import find_image_files, setup_logging


def get_sample_images() -> list[Path]:
    """获取 public/images 中的素材图片"""
    project_root = Path(__file__).parent.parent
    images_dir = project_root / "public" / "images"

    if not images_dir.exists():
        print("⚠️ public/images 目录不存在")
        return []

    image_files = list(find_image_files(images_dir))
    if not image_files:
        print("⚠️ public/images 目录中没有找到图片文件")
    return image_files


def get_output_dir() -> Path:
    """获取输出目录 - 使用项目的 tmp 目录"""
    project_root = Path(__file__).parent.parent
    output_dir = project_root / "tmp" / "batch_demo"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def show_progress(run: BatchRun) -> None:
    if run.phase is RunPhase.PROCESSING:
        print(f"\r  ⏳ 上传中 {run.progress_percent:3d}%", end="", flush=True)
    elif run.phase.is_terminal:
        print(f"\n  {'✅' if run.phase is RunPhase.SUCCEEDED else '❌'} {run.phase.value}")


async def demo_batch() -> None:
    print("\n🎯 批量压缩演示")
    print("=" * 50)

    images = get_sample_images()
    if not images:
        return

    controller = BatchController()
    controller.add_listener(show_progress)

    added = controller.add_items(images)
    print(f"📥 加入 {len(added)} 张图片:")
    for item in added:
        print(f"  {item.name} ({item.get_size_human()})")

    run = await controller.start(build_settings(quality=75, format="webp"))
    if run.phase is not RunPhase.SUCCEEDED:
        print(f"❌ 压缩失败: {run.error}")
        return

    print(f"\n📊 {controller.stats.get_summary()}")
    for result in controller.results:
        print(f"  {result.get_summary()}")

    output_dir = get_output_dir()
    try:
        for result in controller.results:
            saved = (await controller.download_one(result.id)).save(output_dir)
            print(f"💾 {saved}")
        archive = await controller.download_all()
        print(f"📦 {archive.save(output_dir)}")
    except BatchError as e:
        print(f"❌ 下载失败: {e.message}")


def main() -> None:
    setup_logging("WARNING")
    asyncio.run(demo_batch())


if __name__ == "__main__":
    main()
