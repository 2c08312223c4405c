"""核心领域逻辑: 注册表查询、资源筛选、本地存储、描述符构建、版本生命周期"""
