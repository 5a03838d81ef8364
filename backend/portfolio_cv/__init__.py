"""
作品集 CV 导出 - 后端核心模块

模块结构：
- config/     运行期配置与内容模型加载
- models/     数据模型定义（内容模型/文档/导出会话）
- layout/     排版引擎（测量/分页/绘制原语）
- sections/   各分区渲染器与固定顺序流水线
- export/     导出编排（能力加载/PDF写出/保存/提示）
- api/        联系表单转发接口（FastAPI）
"""

__version__ = "0.1.0"
