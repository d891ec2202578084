"""
Nucleo de orquestacion: pipeline por tabla, runner por empresa y dispatcher
por invocacion.
"""
