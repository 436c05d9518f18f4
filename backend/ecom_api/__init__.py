"""电商目录后端 - 分类层级（嵌套集）与商品关联"""

__version__ = "0.1.0"
