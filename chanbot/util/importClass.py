import importlib


def importClass(classFullName):
    s = classFullName.rsplit(".", 1)
    importPackage = s[0]
    className = s[-1]
    mod = importlib.import_module(importPackage)
    ModuleClass = getattr(mod, className)
    return ModuleClass


def _easyImport(baseName, className, useBase):
    
    classFullName = className
    if useBase and baseName:
        classFullName = baseName + "." + className
    
    # first: try Name1.Name2.Name3.Name3 (i.e., class matches filename)
    try:
        s = classFullName.rsplit(".", 1)
        return importClass(classFullName + "." + s[-1])
    except (ImportError, AttributeError):
        # failed
        pass

    # next: try Name1.Name2.Name3 (i.e., Name3 is classname)
    try:
        return importClass(classFullName)
    except (ImportError, AttributeError, ValueError):
        # failed
        pass
    
    # finally: try again while ignoring the base name
    if useBase and baseName:
        return _easyImport(baseName, className, useBase=False)
    raise ImportError("No such module/class: {}".format(classFullName))


def easyImportClass(baseName, className):
    return _easyImport(baseName, className, useBase=True)


def reloadClass(ModuleClass):
    """ Re-execute the source file that defines ModuleClass and return the
    freshly created class object of the same name. """
    mod = importlib.reload(importlib.import_module(ModuleClass.__module__))
    return getattr(mod, ModuleClass.__name__)
