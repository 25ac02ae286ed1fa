"""核心领域: 配置、异常、ref 分类、Puppetfile 重写"""
