"""服务层: 仓库网关、同步编排器、服务容器"""
