"""
开发追踪板：三列看板（待办 / 进行中 / 已完成）+ 单文件 JSON 任务存储
"""
